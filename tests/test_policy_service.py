"""Tests for policy use cases against in-memory collaborators."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from lifepolicy_app.core.errors import (
    ConcurrentModificationError,
    IllegalTransitionError,
    InvalidAmountError,
    InvalidApplicationError,
    InvalidRiskClassError,
    LoanExceedsLimitError,
    PolicyNotActiveError,
    PolicyNotFoundError,
)
from lifepolicy_app.models.policy import (
    LoanResult,
    LoanStatus,
    PaymentMethod,
    PaymentResult,
    PaymentStatus,
    PolicyApplication,
    PolicyStatus,
    RiskClass,
)
from lifepolicy_app.services.policy_service import PolicyService


class FakeStore:
    def __init__(self):
        self.policies = {}
        self.saved = []

    def find_by_number(self, policy_number):
        return self.policies.get(policy_number)

    def save(self, policy):
        current = self.policies.get(policy.policy_number)
        expected_version = 1 if current is None else current.version + 1
        if policy.version != expected_version:
            raise ConcurrentModificationError(policy.policy_number)
        self.policies[policy.policy_number] = policy
        self.saved.append(policy)
        return policy


class SequentialIds:
    def __init__(self):
        self.counter = 0

    def _next(self, prefix):
        self.counter += 1
        return f"{prefix}-{self.counter:04d}"

    def next_policy_number(self):
        return self._next("POL")

    def next_payment_id(self):
        return self._next("PAY")

    def next_confirmation_number(self):
        return self._next("CONF")

    def next_loan_id(self):
        return self._next("LOAN")


class FixedClock:
    def __init__(self, moment):
        self.moment = moment

    def now(self):
        return self.moment

    def today(self):
        return self.moment.date()


class FakePaymentProcessor:
    def __init__(self):
        self.payments = []

    def process(self, payment):
        self.payments.append(payment)
        return PaymentResult(
            payment_id=f"PAY-{len(self.payments)}",
            status=PaymentStatus.COMPLETED,
            confirmation_number=f"CONF-{len(self.payments)}",
        )


class FakeLoanService:
    def __init__(self, clock):
        self.loans = []
        self._clock = clock

    def disburse(self, loan):
        self.loans.append(loan)
        return LoanResult(
            loan_id=f"LOAN-{len(self.loans)}",
            status=LoanStatus.ACTIVE,
            disbursement_date=self._clock.now(),
        )


class FakeAuditRepository:
    def __init__(self):
        self.logs = []

    def add_log(self, action, entity, entity_id, detail):
        self.logs.append((action, entity, entity_id, json.loads(detail)))


ISSUED_AT = datetime(2025, 1, 10, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def env():
    clock = FixedClock(ISSUED_AT)
    store = FakeStore()
    payments = FakePaymentProcessor()
    loans = FakeLoanService(clock)
    audit = FakeAuditRepository()
    service = PolicyService(
        store=store,
        id_generator=SequentialIds(),
        payment_processor=payments,
        loan_service=loans,
        clock=clock,
        audit_repo=audit,
    )
    return service, store, payments, loans, audit, clock


def make_application(**overrides) -> PolicyApplication:
    values = {
        "customer_id": "CUST-001",
        "product_id": "WHOLE_LIFE_100",
        "face_amount": Decimal("100000"),
        "age": 25,
        "risk_class": RiskClass.STANDARD,
        "smoker": False,
    }
    values.update(overrides)
    return PolicyApplication(**values)


def test_issue_policy_starts_active(env) -> None:
    service, store, _, _, audit, _ = env

    policy = service.issue_policy(make_application(customer_id="  CUST-001 "))

    assert policy.policy_number == "POL-0001"
    assert policy.customer_id == "CUST-001"
    assert policy.premium == Decimal("80.00")
    assert policy.status is PolicyStatus.ACTIVE
    assert policy.issue_date == date(2025, 1, 10)
    assert policy.last_modified == ISSUED_AT
    assert policy.version == 1
    assert store.policies["POL-0001"] == policy
    assert audit.logs[0][:3] == ("CREATE", "policy", "POL-0001")
    assert audit.logs[0][3]["after"]["customer_id"] == "****-001"


@pytest.mark.parametrize("age", [18, 85])
def test_issue_accepts_age_bounds(env, age: int) -> None:
    service = env[0]
    assert service.issue_policy(make_application(age=age)).status is PolicyStatus.ACTIVE


@pytest.mark.parametrize(
    "overrides",
    [
        {"customer_id": "   "},
        {"product_id": ""},
        {"face_amount": Decimal("0")},
        {"face_amount": Decimal("-1")},
        {"age": 17},
        {"age": 86},
        {"smoker": "false"},
    ],
)
def test_issue_rejects_invalid_application(env, overrides) -> None:
    service, store, _, _, audit, _ = env

    with pytest.raises(InvalidApplicationError):
        service.issue_policy(make_application(**overrides))

    assert store.saved == []
    assert audit.logs == []


def test_issue_rejects_declined_risk(env) -> None:
    service, store, _, _, _, _ = env

    with pytest.raises(InvalidRiskClassError):
        service.issue_policy(make_application(risk_class=RiskClass.DECLINED))

    assert store.saved == []


def test_quote_premium_does_not_persist(env) -> None:
    service, store, _, _, _, _ = env

    premium = service.quote_premium(make_application(age=45, risk_class=RiskClass.SUBSTANDARD))

    assert premium == Decimal("156.00")
    assert store.saved == []


def test_change_status_bumps_timestamp_and_version(env) -> None:
    service, store, _, _, audit, clock = env
    policy = service.issue_policy(make_application())
    clock.moment = ISSUED_AT + timedelta(days=90)

    lapsed = service.change_status(policy.policy_number, PolicyStatus.LAPSED)

    assert lapsed.status is PolicyStatus.LAPSED
    assert lapsed.last_modified == clock.moment
    assert lapsed.version == 2
    assert lapsed.premium == policy.premium
    assert store.policies[policy.policy_number] == lapsed
    action, _, _, detail = audit.logs[-1]
    assert action == "UPDATE"
    assert detail["changes"]["status"] == {"before": "ACTIVE", "after": "LAPSED"}
    assert "customer_id" not in detail["changes"]

    reinstated = service.change_status(policy.policy_number, PolicyStatus.ACTIVE)
    assert reinstated.status is PolicyStatus.ACTIVE
    assert reinstated.version == 3


def test_change_status_rejects_illegal_transition(env) -> None:
    service, store, _, _, _, _ = env
    policy = service.issue_policy(make_application())
    service.change_status(policy.policy_number, PolicyStatus.SURRENDERED)
    saved_count = len(store.saved)

    with pytest.raises(IllegalTransitionError):
        service.change_status(policy.policy_number, PolicyStatus.ACTIVE)

    assert len(store.saved) == saved_count
    assert store.policies[policy.policy_number].status is PolicyStatus.SURRENDERED


def test_change_status_rejects_self_transition(env) -> None:
    service = env[0]
    policy = service.issue_policy(make_application())

    with pytest.raises(IllegalTransitionError):
        service.change_status(policy.policy_number, PolicyStatus.ACTIVE)


def test_change_status_unknown_policy(env) -> None:
    service = env[0]
    with pytest.raises(PolicyNotFoundError):
        service.change_status("POL-MISSING", PolicyStatus.LAPSED)


def test_pay_premium_hands_processing_payment_to_processor(env) -> None:
    service, _, payments, _, audit, _ = env
    policy = service.issue_policy(make_application())

    result = service.pay_premium(policy.policy_number, Decimal("80.00"), PaymentMethod.ACH)

    assert result.status is PaymentStatus.COMPLETED
    payment = payments.payments[0]
    assert payment.policy_number == policy.policy_number
    assert payment.amount == Decimal("80.00")
    assert payment.payment_method is PaymentMethod.ACH
    assert payment.status is PaymentStatus.PROCESSING
    assert payment.payment_date == ISSUED_AT
    assert audit.logs[-1][0] == "PAYMENT"


def test_pay_premium_on_lapsed_policy_fails(env) -> None:
    service, _, payments, _, _, _ = env
    policy = service.issue_policy(make_application())
    service.change_status(policy.policy_number, PolicyStatus.LAPSED)

    with pytest.raises(PolicyNotActiveError) as exc_info:
        service.pay_premium(policy.policy_number, Decimal("80.00"), PaymentMethod.CHECK)

    assert exc_info.value.status is PolicyStatus.LAPSED
    assert payments.payments == []


def test_pay_premium_rejects_non_positive_amount(env) -> None:
    service, _, payments, _, _, _ = env
    policy = service.issue_policy(make_application())

    with pytest.raises(InvalidAmountError):
        service.pay_premium(policy.policy_number, Decimal("0"), PaymentMethod.CREDIT_CARD)

    assert payments.payments == []


def test_pay_premium_rejects_fractional_cents(env) -> None:
    service, _, payments, _, audit, _ = env
    policy = service.issue_policy(make_application())

    with pytest.raises(InvalidAmountError):
        service.pay_premium(policy.policy_number, Decimal("80.005"), PaymentMethod.ACH)

    assert payments.payments == []
    assert [log[0] for log in audit.logs] == ["CREATE"]


def test_pay_premium_unknown_policy(env) -> None:
    service = env[0]
    with pytest.raises(PolicyNotFoundError):
        service.pay_premium("POL-MISSING", Decimal("10.00"), PaymentMethod.ACH)


def test_cash_value_after_one_year(env) -> None:
    service, _, _, _, _, clock = env
    policy = service.issue_policy(make_application())
    clock.moment = datetime(2026, 1, 10, tzinfo=timezone.utc)

    snapshot = service.calculate_cash_value(policy.policy_number)

    assert snapshot.years_in_force == 1
    assert snapshot.cash_value == Decimal("848.64")
    assert snapshot.maximum_loan == Decimal("763.78")
    assert service.calculate_cash_value(policy.policy_number, date(2026, 1, 9)).cash_value == Decimal("0.00")


def test_borrow_within_limit(env) -> None:
    service, _, _, loans, audit, clock = env
    policy = service.issue_policy(make_application())
    clock.moment = datetime(2026, 1, 10, 12, tzinfo=timezone.utc)

    result = service.borrow_against_policy(policy.policy_number, Decimal("763.78"))

    assert result.status is LoanStatus.ACTIVE
    loan = loans.loans[0]
    assert loan.loan_amount == Decimal("763.78")
    assert loan.interest_rate == Decimal("0.055")
    assert loan.status is LoanStatus.ACTIVE
    assert loan.loan_date == clock.moment
    assert audit.logs[-1][0] == "LOAN"


def test_borrow_over_limit_fails_without_disbursement(env) -> None:
    service, _, _, loans, _, clock = env
    policy = service.issue_policy(make_application())
    clock.moment = datetime(2026, 1, 10, tzinfo=timezone.utc)

    with pytest.raises(LoanExceedsLimitError) as exc_info:
        service.borrow_against_policy(policy.policy_number, Decimal("800.00"))

    assert exc_info.value.maximum == Decimal("763.78")
    assert loans.loans == []


def test_borrow_against_term_policy_fails(env) -> None:
    service, _, _, loans, _, clock = env
    policy = service.issue_policy(make_application(product_id="TERM_20"))
    clock.moment = datetime(2030, 1, 10, tzinfo=timezone.utc)

    with pytest.raises(LoanExceedsLimitError):
        service.borrow_against_policy(policy.policy_number, Decimal("1.00"))

    assert loans.loans == []


def test_borrow_unknown_policy(env) -> None:
    service = env[0]
    with pytest.raises(PolicyNotFoundError):
        service.borrow_against_policy("POL-MISSING", Decimal("1.00"))

