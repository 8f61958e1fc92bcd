"""
Fleet manager: the agent table and lifecycle-enforced control operations.

Every agent lives in one in-memory table keyed by its derived id. State
changes are checked against the lifecycle table before the adapter is
called, and each successful mutation is appended to the audit log.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from agentfleet.adapters.protocol import RuntimeAdapter
from agentfleet.adapters.registry import AdapterRegistry
from agentfleet.core.exceptions import (
    AgentNotFoundError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    RuntimeNotRegisteredError,
)
from agentfleet.core.lifecycle import INITIAL_STATE, AgentState, can_transition
from agentfleet.core.models import (
    AgentConfig,
    AgentHandle,
    AgentMessage,
    HealthStatus,
    InstallConfig,
)
from agentfleet.core.naming import derive_agent_id, normalize_runtime
from agentfleet.store.audit import AuditLog, append_audit


logger = logging.getLogger(__name__)


@dataclass
class AgentRecord:
    id: str
    name: str
    runtime: str
    capabilities: List[str] = field(default_factory=list)
    state: AgentState = INITIAL_STATE
    health: HealthStatus = HealthStatus.UNKNOWN
    model: Optional[str] = None
    handle: Optional[AgentHandle] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "runtime": self.runtime,
            "capabilities": list(self.capabilities),
            "state": self.state.value,
            "health": self.health.value,
            "model": self.model,
        }


@dataclass
class FleetStatus:
    total: int
    running: int
    degraded: int

    def to_dict(self) -> Dict[str, int]:
        return {"total": self.total, "running": self.running, "degraded": self.degraded}


@dataclass
class TaskResult:
    agent_id: str
    response: str

    def to_dict(self) -> Dict[str, str]:
        return {"agent_id": self.agent_id, "response": self.response}


class FleetManager:
    """Drives registered agents through their adapters."""

    def __init__(
        self,
        registry: AdapterRegistry,
        audit: Optional[AuditLog] = None,
        actor: str = "fleet",
    ):
        """
        Args:
            registry: Adapter lookup for every runtime an agent may use.
            audit: Audit log for mutations; auditing is skipped if None.
            actor: Actor name recorded on audit events.
        """
        self.registry = registry
        self.audit = audit
        self.actor = actor
        self._agents: Dict[str, AgentRecord] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Agent table
    # ------------------------------------------------------------------

    def register_agent(
        self,
        name: str,
        runtime: str,
        capabilities: Optional[Iterable[str]] = None,
        model: Optional[str] = None,
    ) -> AgentRecord:
        """
        Add an agent to the fleet in the registered state.

        Args:
            name: Agent display name.
            runtime: Runtime that will host the agent.
            capabilities: Advertised capabilities; defaults to the runtime's.
            model: Optional model identifier passed through on start.

        Returns:
            The new AgentRecord.

        Raises:
            RuntimeNotRegisteredError: If no adapter serves the runtime.
            ConflictError: If an agent with the same derived id exists.
        """
        adapter = self._adapter(runtime)
        runtime = adapter.runtime
        if capabilities is None:
            capabilities = sorted(adapter.metadata().capabilities)

        record = AgentRecord(
            id=derive_agent_id(runtime, name),
            name=name,
            runtime=runtime,
            capabilities=list(capabilities),
            model=model,
        )
        with self._lock:
            if record.id in self._agents:
                raise ConflictError(f"agent '{record.id}' already registered")
            self._agents[record.id] = record

        append_audit(self.audit, self.actor, "agent.register", record.id)
        logger.info(f"Registered agent {record.id} on {runtime}")
        return record

    def get_agent(self, agent_id: str) -> AgentRecord:
        with self._lock:
            record = self._agents.get(agent_id)
        if record is None:
            raise AgentNotFoundError(agent_id)
        return record

    def list_agents(self) -> List[AgentRecord]:
        with self._lock:
            return sorted(self._agents.values(), key=lambda r: r.id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def install(self, agent_id: str, config: Optional[InstallConfig] = None) -> AgentRecord:
        record = self._check(agent_id, AgentState.INSTALLED)
        self._adapter(record.runtime).install(config or InstallConfig(runtime=record.runtime))
        return self._commit(record, AgentState.INSTALLED, "agent.install")

    def start(self, agent_id: str) -> AgentRecord:
        record = self._check(agent_id, AgentState.RUNNING)
        adapter = self._adapter(record.runtime)
        handle = adapter.start(
            AgentConfig(name=record.name, runtime=record.runtime, model=record.model)
        )
        with self._lock:
            record.handle = handle
            record.health = adapter.health(handle)
        return self._commit(record, AgentState.RUNNING, "agent.start")

    def stop(self, agent_id: str) -> AgentRecord:
        record = self._check(agent_id, AgentState.STOPPED)
        if record.handle is not None and record.state != AgentState.STOPPED:
            self._adapter(record.runtime).stop(record.handle)
        with self._lock:
            record.health = HealthStatus.UNKNOWN
        return self._commit(record, AgentState.STOPPED, "agent.stop")

    def restart(self, agent_id: str) -> AgentRecord:
        """
        Restart a running or degraded agent; it ends up running.

        Raises:
            InvalidTransitionError: If the agent is not running or degraded.
        """
        record = self.get_agent(agent_id)
        if record.state not in (AgentState.RUNNING, AgentState.DEGRADED) or record.handle is None:
            raise InvalidTransitionError(agent_id, record.state.value, "restart")
        adapter = self._adapter(record.runtime)
        adapter.restart(record.handle)
        with self._lock:
            record.health = adapter.health(record.handle)
        return self._commit(record, AgentState.RUNNING, "agent.restart")

    def mark_degraded(self, agent_id: str) -> AgentRecord:
        record = self._check(agent_id, AgentState.DEGRADED)
        return self._commit(record, AgentState.DEGRADED, "agent.degraded")

    def mark_recovered(self, agent_id: str) -> AgentRecord:
        record = self.get_agent(agent_id)
        if record.state != AgentState.DEGRADED:
            raise InvalidTransitionError(agent_id, record.state.value, AgentState.RUNNING.value)
        return self._commit(record, AgentState.RUNNING, "agent.recovered")

    # ------------------------------------------------------------------
    # Work routing and observation
    # ------------------------------------------------------------------

    def send_task(
        self,
        message: str,
        agent_id: Optional[str] = None,
        required_capabilities: Iterable[str] = (),
    ) -> TaskResult:
        """
        Deliver a task message to one running agent.

        Args:
            message: Task text.
            agent_id: Pin the task to this agent when given.
            required_capabilities: Otherwise pick the first running agent (by
                id) whose runtime serves every listed capability.

        Returns:
            TaskResult with the chosen agent id and its reply.

        Raises:
            AgentNotFoundError: If the pinned agent does not exist.
            ConflictError: If the pinned agent is not running.
            NotFoundError: If no running agent matches the capabilities.
            AdapterError: If the backend rejects the message.
        """
        required = list(required_capabilities)
        if agent_id is not None:
            record = self.get_agent(agent_id)
            if record.state != AgentState.RUNNING or record.handle is None:
                raise ConflictError(f"agent '{agent_id}' is not running")
        else:
            record = self._select_agent(required)

        adapter = self._adapter(record.runtime)
        response = adapter.send(record.handle, AgentMessage(role="user", content=message))
        append_audit(self.audit, self.actor, "task.send", record.id)
        return TaskResult(agent_id=record.id, response=response.content)

    def check_health(self) -> Dict[str, HealthStatus]:
        """
        Probe every started agent and reconcile running/degraded states.

        An unhealthy running agent is marked degraded; a healthy degraded
        agent is marked running again.

        Returns:
            Mapping of agent id to its probed (or UNKNOWN) health.
        """
        results = {}
        for record in self.list_agents():
            if record.handle is None or record.state not in (
                AgentState.RUNNING,
                AgentState.DEGRADED,
            ):
                results[record.id] = HealthStatus.UNKNOWN
                continue

            health = self._adapter(record.runtime).health(record.handle)
            with self._lock:
                record.health = health
            results[record.id] = health

            if health == HealthStatus.UNHEALTHY and record.state == AgentState.RUNNING:
                logger.warning(f"Agent {record.id} is unhealthy; marking degraded")
                self._commit(record, AgentState.DEGRADED, "agent.degraded")
            elif health == HealthStatus.HEALTHY and record.state == AgentState.DEGRADED:
                logger.info(f"Agent {record.id} recovered")
                self._commit(record, AgentState.RUNNING, "agent.recovered")
        return results

    def fleet_status(self) -> FleetStatus:
        with self._lock:
            states = [r.state for r in self._agents.values()]
        return FleetStatus(
            total=len(states),
            running=sum(1 for s in states if s == AgentState.RUNNING),
            degraded=sum(1 for s in states if s == AgentState.DEGRADED),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _adapter(self, runtime: str) -> RuntimeAdapter:
        adapter = self.registry.get(runtime)
        if adapter is None:
            raise RuntimeNotRegisteredError(normalize_runtime(runtime))
        return adapter

    def _check(self, agent_id: str, to_state: AgentState) -> AgentRecord:
        record = self.get_agent(agent_id)
        if not can_transition(record.state, to_state):
            raise InvalidTransitionError(agent_id, record.state.value, to_state.value)
        return record

    def _commit(self, record: AgentRecord, to_state: AgentState, action: str) -> AgentRecord:
        with self._lock:
            if not can_transition(record.state, to_state):
                raise InvalidTransitionError(record.id, record.state.value, to_state.value)
            from_state = record.state
            record.state = to_state
        append_audit(self.audit, self.actor, action, record.id)
        logger.debug(f"Agent {record.id}: {from_state.value} -> {to_state.value}")
        return record

    def _select_agent(self, required: List[str]) -> AgentRecord:
        for record in self.list_agents():
            if record.state != AgentState.RUNNING or record.handle is None:
                continue
            metadata = self._adapter(record.runtime).metadata()
            if all(metadata.supports_capability(c) for c in required):
                return record
        wanted = ", ".join(required) or "any"
        raise NotFoundError(f"no running agent provides: {wanted}")
