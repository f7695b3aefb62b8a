"""Collaborator contracts consumed by the policy service."""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol

from lifepolicy_app.models.policy import LoanResult, Payment, PaymentResult, Policy, PolicyLoan


class PolicyStore(Protocol):
    def find_by_number(self, policy_number: str) -> Policy | None: ...

    def save(self, policy: Policy) -> Policy:
        """Upsert; raises ConcurrentModificationError when the stored version moved on."""
        ...


class IdGenerator(Protocol):
    def next_policy_number(self) -> str: ...

    def next_payment_id(self) -> str: ...

    def next_confirmation_number(self) -> str: ...

    def next_loan_id(self) -> str: ...


class PaymentProcessor(Protocol):
    def process(self, payment: Payment) -> PaymentResult: ...


class LoanDisbursementService(Protocol):
    def disburse(self, loan: PolicyLoan) -> LoanResult: ...


class Clock(Protocol):
    def now(self) -> datetime: ...

    def today(self) -> date: ...


class AuditLog(Protocol):
    def add_log(self, action: str, entity: str, entity_id: str | None, detail: str) -> None: ...
