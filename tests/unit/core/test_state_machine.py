from __future__ import annotations

import pytest

from foresy.core.exceptions import InvalidTransitionError
from foresy.core.state_machine import CRA_STATE_MACHINE, MISSION_STATE_MACHINE


@pytest.mark.parametrize(
    ("current", "target"),
    [("lead", "pending"), ("pending", "won"), ("won", "in_progress"), ("in_progress", "completed")],
)
def test_mission_linear_transitions_are_allowed(current, target):
    assert MISSION_STATE_MACHINE.can_transition(current, target)


@pytest.mark.parametrize(
    ("current", "target"),
    [("lead", "won"), ("pending", "lead"), ("completed", "in_progress"), ("lead", "completed")],
)
def test_mission_skips_and_reversals_are_rejected(current, target):
    with pytest.raises(InvalidTransitionError) as exc_info:
        MISSION_STATE_MACHINE.assert_transition(current, target)

    assert exc_info.value.error_code == "invalid_transition"
    assert exc_info.value.status_key == "validation_error"


def test_terminal_states():
    assert MISSION_STATE_MACHINE.is_terminal("completed")
    assert CRA_STATE_MACHINE.is_terminal("locked")
    assert not CRA_STATE_MACHINE.is_terminal("draft")


def test_cra_cannot_go_back_to_draft():
    assert CRA_STATE_MACHINE.can_transition("draft", "submitted")
    assert CRA_STATE_MACHINE.can_transition("submitted", "locked")
    assert not CRA_STATE_MACHINE.can_transition("submitted", "draft")
    assert CRA_STATE_MACHINE.states == {"draft", "submitted", "locked"}
