"""Domain errors raised by policy use cases.

All of them derive from ``ValueError`` and are raised before anything is
persisted or handed to a payment or loan collaborator.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lifepolicy_app.models.policy import PolicyStatus


class PolicyError(ValueError):
    """Base class for policy validation failures."""


class InvalidApplicationError(PolicyError):
    """Issuance input is malformed."""


class InvalidRiskClassError(PolicyError):
    """Premium requested for a declined risk."""


class InvalidAmountError(PolicyError):
    """Payment or loan amount is not a positive decimal."""


class PolicyNotFoundError(PolicyError):
    def __init__(self, policy_number: str):
        super().__init__(f"Policy not found: {policy_number}")
        self.policy_number = policy_number


class IllegalTransitionError(PolicyError):
    def __init__(self, current: PolicyStatus, requested: PolicyStatus):
        super().__init__(
            f"Invalid status transition from {current.value} to {requested.value}"
        )
        self.current = current
        self.requested = requested


class PolicyNotActiveError(PolicyError):
    def __init__(self, policy_number: str, status: PolicyStatus):
        super().__init__(
            f"Cannot process payment for policy {policy_number} in status {status.value}"
        )
        self.policy_number = policy_number
        self.status = status


class LoanExceedsLimitError(PolicyError):
    def __init__(self, requested: Decimal, maximum: Decimal):
        super().__init__(f"Loan amount {requested} exceeds maximum allowed: {maximum}")
        self.requested = requested
        self.maximum = maximum


class ConcurrentModificationError(PolicyError):
    """Stored policy version no longer matches the one that was read."""
