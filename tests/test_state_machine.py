"""Unit tests for payment attempt state-machine guardrails."""

import pytest

from paygate.common.state_machine import is_terminal, validate_transition


def test_valid_transition():
    """Sanity check: a legal transition should pass."""

    validate_transition("RECEIVED", "VALIDATED")
    validate_transition("PROCESSED", "COMPLETED")


def test_invalid_transition():
    """Skipping validation must raise to protect orchestration correctness."""

    with pytest.raises(ValueError):
        validate_transition("RECEIVED", "PROCESSED")


def test_terminal_states_have_no_exits():
    for state in ("REJECTED", "FAILED", "COMPLETED"):
        assert is_terminal(state)
        with pytest.raises(ValueError):
            validate_transition(state, "RECEIVED")
    assert not is_terminal("VALIDATED")
