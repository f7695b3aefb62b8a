"""Policy loan limits against accrued cash value."""

from __future__ import annotations

from decimal import Decimal

from lifepolicy_app.core.config import DEFAULT_RULES, PolicyRules
from lifepolicy_app.core.errors import LoanExceedsLimitError
from lifepolicy_app.core.money import exact_arithmetic, round_money
from lifepolicy_app.core.validation import validate_amount
from lifepolicy_app.models.policy import LoanApproval


def max_loan_amount(cash_value: Decimal, rules: PolicyRules = DEFAULT_RULES) -> Decimal:
    """Share of cash value available for borrowing, in cents."""
    with exact_arithmetic():
        maximum = cash_value * rules.max_loan_ratio
    return round_money(maximum)


def evaluate_loan(
    requested: Decimal,
    cash_value: Decimal,
    rules: PolicyRules = DEFAULT_RULES,
) -> LoanApproval:
    """Approve ``requested`` or raise LoanExceedsLimitError."""
    amount = validate_amount(requested, "Loan amount")
    maximum = max_loan_amount(cash_value, rules)
    if amount > maximum:
        raise LoanExceedsLimitError(amount, maximum)
    return LoanApproval(
        requested_amount=amount,
        maximum_amount=maximum,
        cash_value=cash_value,
        interest_rate=rules.loan_interest_rate,
    )
