"""Policy lifecycle state machine."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from lifepolicy_app.core.errors import IllegalTransitionError
from lifepolicy_app.models.policy import PolicyStatus

ALLOWED_TRANSITIONS: Mapping[PolicyStatus, frozenset[PolicyStatus]] = MappingProxyType(
    {
        PolicyStatus.PENDING: frozenset({PolicyStatus.ACTIVE, PolicyStatus.DECLINED}),
        PolicyStatus.ACTIVE: frozenset(
            {PolicyStatus.LAPSED, PolicyStatus.SURRENDERED, PolicyStatus.MATURED}
        ),
        PolicyStatus.LAPSED: frozenset({PolicyStatus.ACTIVE, PolicyStatus.SURRENDERED}),
        PolicyStatus.SURRENDERED: frozenset(),
        PolicyStatus.MATURED: frozenset(),
        PolicyStatus.DECLINED: frozenset(),
    }
)

# Issuance skips PENDING.
INITIAL_STATUS = PolicyStatus.ACTIVE


def allowed_targets(status: PolicyStatus) -> frozenset[PolicyStatus]:
    return ALLOWED_TRANSITIONS[status]


def is_terminal(status: PolicyStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]


def transition(current: PolicyStatus, requested: PolicyStatus) -> PolicyStatus:
    """Return ``requested`` when the edge exists, else raise IllegalTransitionError."""
    if requested not in ALLOWED_TRANSITIONS[current]:
        raise IllegalTransitionError(current, requested)
    return requested
