"""Payment attempt state machine enforced by the orchestrator."""

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "RECEIVED": {"VALIDATED", "REJECTED", "FAILED"},
    "VALIDATED": {"PROCESSED", "FAILED"},
    "PROCESSED": {"COMPLETED"},
    "REJECTED": set(),
    "FAILED": set(),
    "COMPLETED": set(),
}

TERMINAL_STATES = frozenset(state for state, targets in ALLOWED_TRANSITIONS.items() if not targets)


def validate_transition(current: str, new: str) -> None:
    """Raise when a transition is not allowed by the state machine."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid transition: {current} -> {new}")


def is_terminal(state: str) -> bool:
    return state in TERMINAL_STATES
