"""Unit tests for collaboration budget policy."""

import pytest

from src.api.services.collaboration import CollaborationPolicy, SessionState, SessionStatus


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, 8),
        (True, 8),
        ("abc", 8),
        (0, 8),
        (-3, 8),
        (3, 3),
        ("5", 5),
        (20, 20),
        (99, 20),
    ],
)
def test_resolve_iteration_limit(raw, expected):
    assert CollaborationPolicy.resolve_iteration_limit(raw, fallback=8, hard_cap=20) == expected


def _state(**overrides):
    state = SessionState(task="t", model_a="a", model_b="b", max_iterations=3, time_limit_seconds=60)
    state.activate(100.0)
    for key, value in overrides.items():
        setattr(state, key, value)
    return state


def test_stop_reason_none_while_within_budgets():
    assert CollaborationPolicy.stop_reason(_state(), 130.0) is None


def test_stop_reason_complete_takes_precedence():
    state = _state(status=SessionStatus.COMPLETE, iteration=3)
    assert CollaborationPolicy.stop_reason(state, 500.0) == "complete"


def test_stop_reason_max_iterations():
    assert CollaborationPolicy.stop_reason(_state(iteration=3), 110.0) == "max_iterations"


def test_stop_reason_time_limit_is_strictly_greater():
    state = _state()
    assert CollaborationPolicy.stop_reason(state, 160.0) is None
    assert CollaborationPolicy.stop_reason(state, 160.5) == "time_limit"
