"""
Swarm coordination: named agent teams and round-robin task fan-out.

A fan-out creates one in-progress parent task for the team leader and one
pending child task per subtask, spread across the team's leader and worker
members. Reviewers never receive subtasks.
"""

import logging
import threading
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from agentfleet.constants import SWARM_TASK_PREFIX
from agentfleet.core.exceptions import NoWorkersError, TaskNotFoundError, TeamNotFoundError


logger = logging.getLogger(__name__)


class SwarmRole(str, Enum):
    LEADER = "leader"
    WORKER = "worker"
    REVIEWER = "reviewer"


class SwarmTaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class SwarmMember:
    agent_id: str
    role: SwarmRole

    @property
    def can_take_subtasks(self) -> bool:
        return self.role in (SwarmRole.LEADER, SwarmRole.WORKER)


@dataclass
class SwarmTeam:
    name: str
    members: List[SwarmMember] = field(default_factory=list)

    def leader(self) -> Optional[SwarmMember]:
        return next((m for m in self.members if m.role == SwarmRole.LEADER), None)

    def workers(self) -> List[SwarmMember]:
        """Members eligible for subtasks (leaders and workers), in order."""
        return [m for m in self.members if m.can_take_subtasks]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "members": [
                {"agent_id": m.agent_id, "role": m.role.value} for m in self.members
            ],
        }


@dataclass
class SwarmTask:
    id: str
    parent_task: Optional[str]
    description: str
    assigned_to: str
    status: SwarmTaskStatus

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


class SwarmCoordinator:
    """Thread-safe registry of teams and the tasks fanned out to them.

    Team names are not unique: creating a team under an existing name adds a
    second entry, and lookups by name resolve to the earliest one.
    """

    def __init__(self):
        self._teams: List[SwarmTeam] = []
        self._tasks: List[SwarmTask] = []
        self._next_task_id = 0
        self._lock = threading.RLock()

    def create_team(self, name: str, members: Iterable[SwarmMember]) -> SwarmTeam:
        team = SwarmTeam(name=name, members=list(members))
        with self._lock:
            if any(t.name == name for t in self._teams):
                logger.warning(
                    f"Team '{name}' already exists; the earlier team keeps the name"
                )
            self._teams.append(team)
        return team

    def list_teams(self) -> List[SwarmTeam]:
        with self._lock:
            return list(self._teams)

    def get_team(self, name: str) -> SwarmTeam:
        """
        Resolve a team by name.

        Raises:
            TeamNotFoundError: If no team has that name.
        """
        with self._lock:
            for team in self._teams:
                if team.name == name:
                    return team
        raise TeamNotFoundError(name)

    def fan_out(
        self,
        team_name: str,
        task_description: str,
        subtask_descriptions: Iterable[str],
    ) -> List[SwarmTask]:
        """
        Decompose a task into subtasks assigned round-robin to team workers.

        Args:
            team_name: Target team.
            task_description: Description of the parent task.
            subtask_descriptions: One child task per entry.

        Returns:
            The newly created child tasks, in order.

        Raises:
            TeamNotFoundError: If the team does not exist.
            NoWorkersError: If the team has no leader or worker members.
        """
        subtask_descriptions = list(subtask_descriptions)
        with self._lock:
            team = self.get_team(team_name)
            workers = team.workers()
            if not workers:
                raise NoWorkersError(team_name)

            owner = team.leader() or workers[0]
            parent = SwarmTask(
                id=self._allocate_task_id(),
                parent_task=None,
                description=task_description,
                assigned_to=owner.agent_id,
                status=SwarmTaskStatus.IN_PROGRESS,
            )
            self._tasks.append(parent)

            children = []
            for index, description in enumerate(subtask_descriptions):
                worker = workers[index % len(workers)]
                child = SwarmTask(
                    id=self._allocate_task_id(),
                    parent_task=parent.id,
                    description=description,
                    assigned_to=worker.agent_id,
                    status=SwarmTaskStatus.PENDING,
                )
                self._tasks.append(child)
                children.append(child)

        logger.info(
            f"Fanned out {parent.id} to team '{team_name}': "
            f"{len(children)} subtask(s) across {len(workers)} worker(s)"
        )
        return children

    def list_tasks(self, parent: Optional[str] = None) -> List[SwarmTask]:
        """All tasks, or only the children of `parent` when given."""
        with self._lock:
            if parent is None:
                return list(self._tasks)
            return [t for t in self._tasks if t.parent_task == parent]

    def get_task(self, task_id: str) -> SwarmTask:
        with self._lock:
            for task in self._tasks:
                if task.id == task_id:
                    return task
        raise TaskNotFoundError(task_id)

    def complete_task(self, task_id: str) -> SwarmTask:
        return self._set_status(task_id, SwarmTaskStatus.COMPLETED)

    def fail_task(self, task_id: str) -> SwarmTask:
        return self._set_status(task_id, SwarmTaskStatus.FAILED)

    def is_fan_out_complete(self, parent_id: str) -> bool:
        """True only if the parent has subtasks and all of them are completed."""
        subtasks = self.list_tasks(parent=parent_id)
        return bool(subtasks) and all(
            t.status == SwarmTaskStatus.COMPLETED for t in subtasks
        )

    def _set_status(self, task_id: str, status: SwarmTaskStatus) -> SwarmTask:
        with self._lock:
            task = self.get_task(task_id)
            task.status = status
        logger.debug(f"Task {task_id} -> {status.value}")
        return task

    def _allocate_task_id(self) -> str:
        # Caller holds the lock
        task_id = f"{SWARM_TASK_PREFIX}{self._next_task_id}"
        self._next_task_id += 1
        return task_id
