"""Tests for the policy lifecycle state machine."""

from itertools import product

import pytest

from lifepolicy_app.core.errors import IllegalTransitionError
from lifepolicy_app.models.policy import PolicyStatus
from lifepolicy_app.services.status_guard import (
    ALLOWED_TRANSITIONS,
    allowed_targets,
    is_terminal,
    transition,
)

S = PolicyStatus

EXPECTED_EDGES = {
    (S.PENDING, S.ACTIVE),
    (S.PENDING, S.DECLINED),
    (S.ACTIVE, S.LAPSED),
    (S.ACTIVE, S.SURRENDERED),
    (S.ACTIVE, S.MATURED),
    (S.LAPSED, S.ACTIVE),
    (S.LAPSED, S.SURRENDERED),
}


def test_table_covers_every_status() -> None:
    assert set(ALLOWED_TRANSITIONS) == set(PolicyStatus)


@pytest.mark.parametrize(("current", "requested"), list(product(PolicyStatus, PolicyStatus)))
def test_transition_table_is_exhaustive(current: PolicyStatus, requested: PolicyStatus) -> None:
    if (current, requested) in EXPECTED_EDGES:
        assert transition(current, requested) is requested
    else:
        with pytest.raises(IllegalTransitionError) as exc_info:
            transition(current, requested)
        assert exc_info.value.current is current
        assert exc_info.value.requested is requested


def test_terminal_states() -> None:
    assert {status for status in PolicyStatus if is_terminal(status)} == {
        S.SURRENDERED,
        S.MATURED,
        S.DECLINED,
    }
    assert allowed_targets(S.LAPSED) == frozenset({S.ACTIVE, S.SURRENDERED})
