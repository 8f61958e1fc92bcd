"""Agent lifecycle: AgentState and its legal transition table.

The state machine is a pure predicate. It holds no per-agent state; whoever
drives an agent stores its current state and consults the table before
changing it.
"""

from enum import Enum


class AgentState(str, Enum):
    """Lifecycle state of one agent instance."""

    REGISTERED = "registered"
    INSTALLED = "installed"
    RUNNING = "running"
    STOPPED = "stopped"
    DEGRADED = "degraded"

    def can_transition_to(self, next_state: "AgentState") -> bool:
        return can_transition(self, next_state)


INITIAL_STATE = AgentState.REGISTERED

# from_state -> set of valid target states (self-transitions handled separately)
TRANSITIONS = {
    AgentState.REGISTERED: {AgentState.INSTALLED},
    AgentState.INSTALLED: {AgentState.RUNNING},
    AgentState.RUNNING: {AgentState.STOPPED, AgentState.DEGRADED},
    AgentState.DEGRADED: {AgentState.RUNNING},
    AgentState.STOPPED: {AgentState.RUNNING},
}


def can_transition(from_state: AgentState, to_state: AgentState) -> bool:
    """
    Check if an agent state transition is legal.

    State machine:
    - registered -> installed -> running
    - running <-> degraded
    - running -> stopped -> running (no terminal state)
    - any state -> itself (idempotent no-op)

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is valid, False otherwise
    """
    if from_state == to_state:
        return True
    return to_state in TRANSITIONS.get(from_state, set())
