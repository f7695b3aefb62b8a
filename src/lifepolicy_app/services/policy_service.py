"""Policy service: issuance, status changes, premium payments and policy loans."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal

from lifepolicy_app.core.config import DEFAULT_RULES, PolicyRules
from lifepolicy_app.core.crypto import mask_customer_id
from lifepolicy_app.core.errors import PolicyNotActiveError, PolicyNotFoundError
from lifepolicy_app.core.validation import validate_amount, validate_application
from lifepolicy_app.models.policy import (
    LoanResult,
    LoanStatus,
    Payment,
    PaymentMethod,
    PaymentResult,
    PaymentStatus,
    Policy,
    PolicyApplication,
    PolicyCashValue,
    PolicyLoan,
    PolicyStatus,
)
from lifepolicy_app.services import status_guard
from lifepolicy_app.services.cash_value import calculate_cash_value, years_in_force
from lifepolicy_app.services.loan_eligibility import evaluate_loan, max_loan_amount
from lifepolicy_app.services.ports import (
    AuditLog,
    Clock,
    IdGenerator,
    LoanDisbursementService,
    PaymentProcessor,
    PolicyStore,
)
from lifepolicy_app.services.premium_calculator import calculate_premium

logger = logging.getLogger(__name__)


class PolicyService:
    """Coordinates policy use cases.

    Every precondition is checked before the store or a processor is
    called, so a failed request leaves no state behind.
    """

    def __init__(
        self,
        store: PolicyStore,
        id_generator: IdGenerator,
        payment_processor: PaymentProcessor,
        loan_service: LoanDisbursementService,
        clock: Clock,
        rules: PolicyRules = DEFAULT_RULES,
        audit_repo: AuditLog | None = None,
    ):
        self._store = store
        self._ids = id_generator
        self._payments = payment_processor
        self._loans = loan_service
        self._clock = clock
        self._rules = rules
        self._audit_repo = audit_repo

    def quote_premium(self, application: PolicyApplication) -> Decimal:
        """Validate and price an application without issuing it."""
        return calculate_premium(validate_application(application, self._rules))

    def issue_policy(self, application: PolicyApplication) -> Policy:
        """Validate, price and persist a new active policy."""
        validated = validate_application(application, self._rules)
        premium = calculate_premium(validated)

        policy = Policy(
            policy_number=self._ids.next_policy_number(),
            customer_id=validated.customer_id,
            product_id=validated.product_id,
            face_amount=validated.face_amount,
            premium=premium,
            issue_date=self._clock.today(),
            status=status_guard.INITIAL_STATUS,
            last_modified=self._clock.now(),
        )
        saved = self._store.save(policy)
        logger.info("Issued policy %s premium=%s", saved.policy_number, saved.premium)
        self._audit(
            "CREATE",
            "policy",
            saved.policy_number,
            {"event": "policy issued", "after": self._snapshot(saved)},
        )
        return saved

    def get_policy(self, policy_number: str) -> Policy:
        policy = self._store.find_by_number(policy_number)
        if policy is None:
            raise PolicyNotFoundError(policy_number)
        return policy

    def change_status(self, policy_number: str, new_status: PolicyStatus) -> Policy:
        """Apply a lifecycle transition allowed by the status guard."""
        policy = self.get_policy(policy_number)
        target = status_guard.transition(policy.status, PolicyStatus(new_status))

        updated = replace(
            policy,
            status=target,
            last_modified=self._clock.now(),
            version=policy.version + 1,
        )
        saved = self._store.save(updated)
        logger.info(
            "Policy %s status %s -> %s",
            policy_number,
            policy.status.value,
            saved.status.value,
        )
        self._audit(
            "UPDATE",
            "policy",
            policy_number,
            {
                "event": "policy status changed",
                "changes": self._diff(self._snapshot(policy), self._snapshot(saved)),
            },
        )
        return saved

    def pay_premium(
        self,
        policy_number: str,
        amount: Decimal,
        payment_method: PaymentMethod,
    ) -> PaymentResult:
        """Hand a premium payment for an active policy to the payment processor."""
        policy = self.get_policy(policy_number)
        if policy.status is not PolicyStatus.ACTIVE:
            raise PolicyNotActiveError(policy_number, policy.status)
        value = validate_amount(amount, "Payment amount")

        payment = Payment(
            policy_number=policy_number,
            amount=value,
            payment_method=PaymentMethod(payment_method),
            payment_date=self._clock.now(),
            status=PaymentStatus.PROCESSING,
        )
        result = self._payments.process(payment)
        logger.info(
            "Payment %s for policy %s: %s",
            result.payment_id,
            policy_number,
            result.status.value,
        )
        self._audit(
            "PAYMENT",
            "policy",
            policy_number,
            {
                "event": "premium payment",
                "amount": str(value),
                "method": payment.payment_method.value,
                "payment_id": result.payment_id,
                "status": result.status.value,
            },
        )
        return result

    def calculate_cash_value(self, policy_number: str, as_of: date | None = None) -> PolicyCashValue:
        """Cash value and loan headroom of one policy at ``as_of`` (default today)."""
        policy = self.get_policy(policy_number)
        evaluation_date = as_of or self._clock.today()
        years = years_in_force(policy.issue_date, evaluation_date)
        cash_value = calculate_cash_value(policy, years, self._rules)
        return PolicyCashValue(
            policy_number=policy_number,
            as_of=evaluation_date,
            years_in_force=max(years, 0),
            cash_value=cash_value,
            maximum_loan=max_loan_amount(cash_value, self._rules),
        )

    def borrow_against_policy(self, policy_number: str, amount: Decimal) -> LoanResult:
        """Validate a loan against cash value and hand it to the disbursement service."""
        snapshot = self.calculate_cash_value(policy_number)
        approval = evaluate_loan(amount, snapshot.cash_value, self._rules)

        loan = PolicyLoan(
            policy_number=policy_number,
            loan_amount=approval.requested_amount,
            interest_rate=approval.interest_rate,
            loan_date=self._clock.now(),
            status=LoanStatus.ACTIVE,
        )
        result = self._loans.disburse(loan)
        logger.info(
            "Loan %s of %s against policy %s (cash value %s)",
            result.loan_id,
            approval.requested_amount,
            policy_number,
            snapshot.cash_value,
        )
        self._audit(
            "LOAN",
            "policy",
            policy_number,
            {
                "event": "policy loan",
                "amount": str(approval.requested_amount),
                "maximum": str(approval.maximum_amount),
                "interest_rate": str(approval.interest_rate),
                "loan_id": result.loan_id,
            },
        )
        return result

    def _audit(self, action: str, entity: str, entity_id: str, detail: dict) -> None:
        if self._audit_repo is None:
            return
        self._audit_repo.add_log(action, entity, entity_id, json.dumps(detail, ensure_ascii=False))

    @staticmethod
    def _snapshot(policy: Policy) -> dict[str, str]:
        """Audit-friendly view; the customer id is masked to its last four characters."""
        return {
            "customer_id": mask_customer_id(policy.customer_id),
            "product_id": policy.product_id,
            "face_amount": str(policy.face_amount),
            "premium": str(policy.premium),
            "issue_date": policy.issue_date.isoformat(),
            "status": policy.status.value,
            "version": str(policy.version),
        }

    @staticmethod
    def _diff(before: dict[str, str], after: dict[str, str]) -> dict[str, dict[str, str]]:
        changes: dict[str, dict[str, str]] = {}
        for key in sorted(set(before) | set(after)):
            old = before.get(key, "")
            new = after.get(key, "")
            if old != new:
                changes[key] = {"before": old, "after": new}
        return changes
