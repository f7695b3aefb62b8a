"""Policy domain models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class RiskClass(str, Enum):
    PREFERRED = "PREFERRED"
    STANDARD = "STANDARD"
    SUBSTANDARD = "SUBSTANDARD"
    DECLINED = "DECLINED"


class PolicyStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    LAPSED = "LAPSED"
    SURRENDERED = "SURRENDERED"
    MATURED = "MATURED"
    DECLINED = "DECLINED"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "BANK_TRANSFER"
    CREDIT_CARD = "CREDIT_CARD"
    CHECK = "CHECK"
    ACH = "ACH"


class PaymentStatus(str, Enum):
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class LoanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAID_OFF = "PAID_OFF"
    DEFAULTED = "DEFAULTED"


@dataclass
class PolicyApplication:
    """Input model for issuing a policy."""

    customer_id: str
    product_id: str
    face_amount: Decimal
    age: int
    risk_class: RiskClass
    smoker: bool


@dataclass(frozen=True)
class Policy:
    """Issued policy. Only status, last_modified and version change after issuance."""

    policy_number: str
    customer_id: str
    product_id: str
    face_amount: Decimal
    premium: Decimal
    issue_date: date
    status: PolicyStatus
    last_modified: datetime
    version: int = 1

    def has_cash_value(self, whole_life_prefix: str) -> bool:
        """Whole-life products accrue cash value."""
        return self.product_id.startswith(whole_life_prefix)


@dataclass(frozen=True)
class Payment:
    """One premium payment attempt; retries create a new record."""

    policy_number: str
    amount: Decimal
    payment_method: PaymentMethod
    payment_date: datetime
    status: PaymentStatus


@dataclass(frozen=True)
class PaymentResult:
    payment_id: str
    status: PaymentStatus
    confirmation_number: str


@dataclass(frozen=True)
class PolicyLoan:
    """Loan handed to the disbursement service."""

    policy_number: str
    loan_amount: Decimal
    interest_rate: Decimal
    loan_date: datetime
    status: LoanStatus


@dataclass(frozen=True)
class LoanApproval:
    """Approved loan descriptor produced by the eligibility check."""

    requested_amount: Decimal
    maximum_amount: Decimal
    cash_value: Decimal
    interest_rate: Decimal


@dataclass(frozen=True)
class LoanResult:
    loan_id: str
    status: LoanStatus
    disbursement_date: datetime


@dataclass(frozen=True)
class PolicyCashValue:
    """Cash value snapshot for one policy at an evaluation date."""

    policy_number: str
    as_of: date
    years_in_force: int
    cash_value: Decimal
    maximum_loan: Decimal
