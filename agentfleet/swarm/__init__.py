"""
Swarm layer: teams of agents and task fan-out with completion tracking.
"""

from agentfleet.swarm.coordinator import (
    SwarmCoordinator,
    SwarmMember,
    SwarmRole,
    SwarmTask,
    SwarmTaskStatus,
    SwarmTeam,
)

__all__ = [
    "SwarmCoordinator",
    "SwarmMember",
    "SwarmRole",
    "SwarmTask",
    "SwarmTaskStatus",
    "SwarmTeam",
]
