"""Maintenance request workflow: states and the transition validator.

Valid flows:
    new -> in_progress -> repaired
    new -> in_progress -> scrap
    new -> scrap            (emergency scrap without starting work)

``repaired`` and ``scrap`` are terminal. Nothing here performs I/O; callers
persist the new state only after ``validate_state_transition`` allows it.
"""

from __future__ import annotations

from dataclasses import dataclass

NEW = "new"
IN_PROGRESS = "in_progress"
REPAIRED = "repaired"
SCRAP = "scrap"

REQUEST_STATES: tuple[str, ...] = (NEW, IN_PROGRESS, REPAIRED, SCRAP)

ALLOWED_STATE_TRANSITIONS: dict[str, tuple[str, ...]] = {
    NEW: (IN_PROGRESS, SCRAP),
    IN_PROGRESS: (REPAIRED, SCRAP),
    REPAIRED: (),
    SCRAP: (),
}

STATE_DISPLAY_NAMES: dict[str, str] = {
    NEW: "New",
    IN_PROGRESS: "In Progress",
    REPAIRED: "Repaired",
    SCRAP: "Scrap",
}


@dataclass(frozen=True)
class TransitionResult:
    allowed: bool
    reason: str | None = None


def _display(state: str) -> str:
    return STATE_DISPLAY_NAMES.get(state, state)


def is_known_state(state: object) -> bool:
    return isinstance(state, str) and state in ALLOWED_STATE_TRANSITIONS


def is_terminal_state(state: str | None) -> bool:
    """True for states with no outgoing transitions; unknown states are not terminal."""
    if not is_known_state(state):
        return False
    return not ALLOWED_STATE_TRANSITIONS[state]


def get_allowed_transitions(state: str | None) -> tuple[str, ...]:
    if not is_known_state(state):
        return ()
    return ALLOWED_STATE_TRANSITIONS[state]


def _terminal_reason(state: str) -> str:
    return f"Cannot change state from '{_display(state)}'. This is a terminal state."


def validate_state_transition(current: str | None, requested: str | None) -> TransitionResult:
    if not is_known_state(current):
        return TransitionResult(False, f"Unknown current state: {current}")
    if not is_known_state(requested):
        return TransitionResult(False, f"Unknown target state: {requested}")

    if is_terminal_state(current):
        return TransitionResult(False, _terminal_reason(current))

    # Idempotent for non-terminal states.
    if current == requested:
        return TransitionResult(True)

    allowed = ALLOWED_STATE_TRANSITIONS[current]
    if requested in allowed:
        return TransitionResult(True)

    if current == NEW and requested == REPAIRED:
        return TransitionResult(
            False,
            f"Cannot transition from '{_display(NEW)}' to '{_display(REPAIRED)}'. "
            f"Work must pass through '{_display(IN_PROGRESS)}' first.",
        )

    allowed_names = ", ".join(_display(state) for state in allowed) or "none"
    return TransitionResult(
        False,
        f"Invalid state transition from '{_display(current)}' to '{_display(requested)}'. "
        f"Allowed transitions: {allowed_names}.",
    )
