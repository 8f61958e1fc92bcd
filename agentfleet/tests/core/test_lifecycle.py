"""
Unit tests for the agent lifecycle transition table.
"""

import pytest

from agentfleet.core.lifecycle import INITIAL_STATE, AgentState, can_transition


LEGAL = {
    (AgentState.REGISTERED, AgentState.INSTALLED),
    (AgentState.INSTALLED, AgentState.RUNNING),
    (AgentState.RUNNING, AgentState.STOPPED),
    (AgentState.RUNNING, AgentState.DEGRADED),
    (AgentState.DEGRADED, AgentState.RUNNING),
    (AgentState.STOPPED, AgentState.RUNNING),
}


class TestTransitionTable:
    """Check every (from, to) pair against the legal set."""

    @pytest.mark.parametrize("from_state", list(AgentState))
    @pytest.mark.parametrize("to_state", list(AgentState))
    def test_pair(self, from_state, to_state):
        expected = from_state == to_state or (from_state, to_state) in LEGAL
        assert can_transition(from_state, to_state) is expected

    def test_initial_state_is_registered(self):
        assert INITIAL_STATE == AgentState.REGISTERED

    def test_self_transition_always_allowed(self):
        for state in AgentState:
            assert state.can_transition_to(state)

    def test_no_terminal_state(self):
        """Stopped agents can be started again."""
        assert AgentState.STOPPED.can_transition_to(AgentState.RUNNING)

    def test_cannot_skip_install(self):
        assert not can_transition(AgentState.REGISTERED, AgentState.RUNNING)

    def test_degraded_cannot_stop_directly(self):
        assert not can_transition(AgentState.DEGRADED, AgentState.STOPPED)
