"""Cash value accrual for whole-life policies."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from lifepolicy_app.core.config import DEFAULT_RULES, PolicyRules
from lifepolicy_app.core.money import ONE, ZERO, exact_arithmetic, round_money
from lifepolicy_app.models.policy import Policy

MONTHS_PER_YEAR = 12


def years_in_force(issue_date: date, as_of: date) -> int:
    """Whole years elapsed from issue_date to as_of; negative before issuance."""
    years = as_of.year - issue_date.year
    if as_of >= issue_date:
        if (as_of.month, as_of.day) < (issue_date.month, issue_date.day):
            years -= 1
    elif (as_of.month, as_of.day) > (issue_date.month, issue_date.day):
        years += 1
    return years


def accrue(monthly_premium: Decimal, years: int, rules: PolicyRules = DEFAULT_RULES) -> Decimal:
    """Accumulate net premiums, compounding the whole balance once per year."""
    balance = ZERO
    if years <= 0:
        return round_money(balance)

    with exact_arithmetic():
        growth = ONE + rules.cash_value_interest_rate
        for _ in range(years):
            yearly_premium = monthly_premium * MONTHS_PER_YEAR
            expenses = yearly_premium * rules.expense_ratio
            balance = (balance + (yearly_premium - expenses)) * growth
    return round_money(balance)


def calculate_cash_value(policy: Policy, years: int, rules: PolicyRules = DEFAULT_RULES) -> Decimal:
    """Return the policy's cash value after ``years`` in force; zero for term products."""
    if not policy.has_cash_value(rules.whole_life_prefix):
        return ZERO
    return accrue(policy.premium, years, rules)
