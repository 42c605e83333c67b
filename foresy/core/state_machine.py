"""Canonical state transition tables for missions and activity reports."""

from __future__ import annotations

from foresy.core.exceptions import InvalidTransitionError


class StateMachine:
    """Fixed adjacency table; anything not listed is rejected."""

    def __init__(self, transitions: dict[str, set[str]]) -> None:
        self._transitions = transitions

    @property
    def states(self) -> set[str]:
        targets = set().union(*self._transitions.values()) if self._transitions else set()
        return set(self._transitions) | targets

    def can_transition(self, current: str, target: str) -> bool:
        return target in self._transitions.get(current, set())

    def is_terminal(self, state: str) -> bool:
        return not self._transitions.get(state)

    def assert_transition(self, current: str, target: str) -> None:
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(current, target)


MISSION_STATE_MACHINE = StateMachine(
    {
        "lead": {"pending"},
        "pending": {"won"},
        "won": {"in_progress"},
        "in_progress": {"completed"},
    }
)

CRA_STATE_MACHINE = StateMachine(
    {
        "draft": {"submitted"},
        "submitted": {"locked"},
    }
)
