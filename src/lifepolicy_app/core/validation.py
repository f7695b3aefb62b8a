"""Input validation rules for policy applications and money amounts."""

from __future__ import annotations

from decimal import Decimal

from lifepolicy_app.core.config import DEFAULT_RULES, PolicyRules
from lifepolicy_app.core.errors import InvalidAmountError, InvalidApplicationError
from lifepolicy_app.core.money import ZERO, round_money, to_decimal
from lifepolicy_app.models.policy import PolicyApplication, RiskClass


def validate_required_text(value: str, field_name: str) -> str:
    """Validate non-blank text fields."""
    normalized = (value or "").strip()
    if not normalized:
        raise InvalidApplicationError(f"{field_name} is required")
    return normalized


def validate_face_amount(face_amount: Decimal | int | str) -> Decimal:
    try:
        amount = to_decimal(face_amount)
    except (TypeError, ValueError) as error:
        raise InvalidApplicationError(f"Face amount is not a decimal: {face_amount!r}") from error
    if amount <= ZERO:
        raise InvalidApplicationError("Face amount must be positive")
    return amount


def validate_age(age: int, rules: PolicyRules = DEFAULT_RULES) -> int:
    if isinstance(age, bool) or not isinstance(age, int):
        raise InvalidApplicationError(f"Age must be an integer: {age!r}")
    if age < rules.min_age:
        raise InvalidApplicationError(f"Minimum age is {rules.min_age}")
    if age > rules.max_age:
        raise InvalidApplicationError(f"Maximum age is {rules.max_age}")
    return age


def validate_smoker(smoker: bool) -> bool:
    if not isinstance(smoker, bool):
        raise InvalidApplicationError(f"Smoker flag must be a boolean: {smoker!r}")
    return smoker


def validate_application(
    application: PolicyApplication,
    rules: PolicyRules = DEFAULT_RULES,
) -> PolicyApplication:
    """Return a normalized copy of the application or raise InvalidApplicationError."""
    try:
        risk_class = RiskClass(application.risk_class)
    except ValueError as error:
        raise InvalidApplicationError(f"Unknown risk class: {application.risk_class!r}") from error

    return PolicyApplication(
        customer_id=validate_required_text(application.customer_id, "Customer ID"),
        product_id=validate_required_text(application.product_id, "Product ID"),
        face_amount=validate_face_amount(application.face_amount),
        age=validate_age(application.age, rules),
        risk_class=risk_class,
        smoker=validate_smoker(application.smoker),
    )


def validate_amount(amount: Decimal | int | str, field_name: str) -> Decimal:
    """Validate a positive payment or loan amount."""
    try:
        value = to_decimal(amount)
    except (TypeError, ValueError) as error:
        raise InvalidAmountError(f"{field_name} is not a decimal: {amount!r}") from error
    if value <= ZERO:
        raise InvalidAmountError(f"{field_name} must be positive")
    if value != round_money(value):
        raise InvalidAmountError(f"{field_name} must be in whole cents: {amount!r}")
    return value
