"""Adapter protocol and contracts for runtime backends.

Defines the shared contract every runtime adapter implements. The orchestrator
drives heterogeneous backends only through this interface; backend-specific
behavior (message content, model invocation, tool execution) stays behind it.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List

from agentfleet.core.exceptions import (
    AdapterError,
    BackendUnreachableError,
    MessagingNotSupportedError,
)
from agentfleet.core.models import (
    AgentConfig,
    AgentHandle,
    AgentMessage,
    AgentMetrics,
    AgentResponse,
    HealthStatus,
    InstallConfig,
    RuntimeConfig,
    RuntimeMetadata,
    Skill,
    SkillManifest,
)

Event = Dict[str, Any]


class RuntimeAdapter(ABC):
    """Control-plane contract for one runtime backend.

    Operations against different handles may run concurrently; the adapter is
    responsible for its own internal safety.
    """

    @abstractmethod
    def metadata(self) -> RuntimeMetadata:
        """Return the backend descriptor. Pure and stable across calls."""

    @property
    def runtime(self) -> str:
        return self.metadata().runtime

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    def install(self, config: InstallConfig) -> None:
        """Install the backend. May fail with a backend-specific error."""

    @abstractmethod
    def start(self, config: AgentConfig) -> AgentHandle:
        """Start an agent; the handle id is derived from runtime and agent name."""

    @abstractmethod
    def stop(self, handle: AgentHandle) -> None:
        """Stop a running agent."""

    @abstractmethod
    def restart(self, handle: AgentHandle) -> None:
        """Restart a running agent."""

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @abstractmethod
    def health(self, handle: AgentHandle) -> HealthStatus:
        """Report health; UNKNOWN rather than an error for unreachable handles."""

    @abstractmethod
    def metrics(self, handle: AgentHandle) -> AgentMetrics:
        """Report metrics; zeroed rather than an error for unreachable handles."""

    # ------------------------------------------------------------------
    # Messaging
    # ------------------------------------------------------------------

    @abstractmethod
    def send(self, handle: AgentHandle, message: AgentMessage) -> AgentResponse:
        """Synchronous chat/task entry point."""

    @abstractmethod
    def subscribe(self, handle: AgentHandle, event: str) -> Iterator[Event]:
        """Event stream; empty for backends without event support."""

    # ------------------------------------------------------------------
    # Configuration and extensions
    # ------------------------------------------------------------------

    @abstractmethod
    def get_config(self, handle: AgentHandle) -> RuntimeConfig:
        pass

    @abstractmethod
    def set_config(self, handle: AgentHandle, config: RuntimeConfig) -> None:
        pass

    @abstractmethod
    def list_skills(self, handle: AgentHandle) -> List[Skill]:
        pass

    @abstractmethod
    def install_skill(self, handle: AgentHandle, skill: SkillManifest) -> None:
        pass


__all__ = [
    "Event",
    "RuntimeAdapter",
    "AdapterError",
    "BackendUnreachableError",
    "MessagingNotSupportedError",
]
