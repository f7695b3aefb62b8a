"""Premium rating from applicant attributes.

premium = face_amount * 0.001 * age factor * risk factor * smoking factor,
rounded half-up to cents. Declined risks are never priced.
"""

from __future__ import annotations

from decimal import Decimal

from lifepolicy_app.core.errors import InvalidRiskClassError
from lifepolicy_app.core.money import exact_arithmetic, round_money, to_decimal
from lifepolicy_app.models.policy import PolicyApplication, RiskClass

BASE_RATE = Decimal("0.001")

# (upper bound exclusive, factor); ages at or above the last bound use AGE_FACTOR_OLDEST
AGE_BANDS: tuple[tuple[int, Decimal], ...] = (
    (30, Decimal("0.8")),
    (40, Decimal("1.0")),
    (50, Decimal("1.2")),
    (60, Decimal("1.5")),
)
AGE_FACTOR_OLDEST = Decimal("2.0")

RISK_FACTORS: dict[RiskClass, Decimal] = {
    RiskClass.PREFERRED: Decimal("0.9"),
    RiskClass.STANDARD: Decimal("1.0"),
    RiskClass.SUBSTANDARD: Decimal("1.3"),
}

SMOKER_FACTOR = Decimal("1.5")
NON_SMOKER_FACTOR = Decimal("1.0")


def age_factor(age: int) -> Decimal:
    for upper_bound, factor in AGE_BANDS:
        if age < upper_bound:
            return factor
    return AGE_FACTOR_OLDEST


def risk_factor(risk_class: RiskClass) -> Decimal:
    if risk_class is RiskClass.DECLINED:
        raise InvalidRiskClassError("Cannot issue policy for declined risk")
    return RISK_FACTORS[risk_class]


def smoking_factor(smoker: bool) -> Decimal:
    return SMOKER_FACTOR if smoker else NON_SMOKER_FACTOR


def calculate_premium(application: PolicyApplication) -> Decimal:
    """Price an application; raises InvalidRiskClassError for declined risks."""
    risk = risk_factor(RiskClass(application.risk_class))
    face_amount = to_decimal(application.face_amount)

    with exact_arithmetic():
        premium = (
            face_amount
            * BASE_RATE
            * age_factor(application.age)
            * risk
            * smoking_factor(application.smoker)
        )
    return round_money(premium)
