"""Identifier generation for policies, payments and loans."""

from __future__ import annotations

import uuid

POLICY_PREFIX = "POL"
PAYMENT_PREFIX = "PAY"
CONFIRMATION_PREFIX = "CONF"
LOAN_PREFIX = "LOAN"


class UuidIdGenerator:
    """Prefixed random identifiers, unique per call."""

    @staticmethod
    def _next(prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4().hex.upper()}"

    def next_policy_number(self) -> str:
        return self._next(POLICY_PREFIX)

    def next_payment_id(self) -> str:
        return self._next(PAYMENT_PREFIX)

    def next_confirmation_number(self) -> str:
        return self._next(CONFIRMATION_PREFIX)

    def next_loan_id(self) -> str:
        return self._next(LOAN_PREFIX)
