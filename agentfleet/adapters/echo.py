"""In-process echo runtime.

A backend with no external process: it keeps agent state in memory and
answers send() by echoing the message. Used for catalog runtimes that have
no local executable configured, and as the reference adapter in tests.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from agentfleet.adapters.protocol import Event, RuntimeAdapter
from agentfleet.core.exceptions import AdapterError, AgentNotFoundError, BackendUnreachableError
from agentfleet.core.models import (
    AgentConfig,
    AgentHandle,
    AgentMessage,
    AgentMetrics,
    AgentResponse,
    ChannelSupport,
    ChannelType,
    HealthStatus,
    InstallConfig,
    RuntimeConfig,
    RuntimeMetadata,
    Skill,
    SkillManifest,
)
from agentfleet.core.naming import derive_agent_id, normalize_runtime


logger = logging.getLogger(__name__)


@dataclass
class _EchoAgent:
    handle: AgentHandle
    running: bool = True
    config: Dict[str, object] = field(default_factory=dict)
    skills: List[Skill] = field(default_factory=list)
    history: List[AgentMessage] = field(default_factory=list)


class EchoAdapter(RuntimeAdapter):
    """Runtime adapter that answers every message with an echo."""

    def __init__(
        self,
        runtime: str,
        display_name: Optional[str] = None,
        version: str = "unknown",
        language: str = "python",
        capabilities: Iterable[str] = ("chat",),
        default_port: Optional[int] = None,
        config_format: Optional[str] = None,
        channel_support: Optional[Mapping[ChannelType, ChannelSupport]] = None,
    ):
        runtime = normalize_runtime(runtime)
        self.display_name = display_name or runtime
        self._metadata = RuntimeMetadata(
            runtime=runtime,
            version=version,
            language=language,
            capabilities=frozenset(capabilities),
            default_port=default_port,
            config_format=config_format,
            channel_support=dict(channel_support or {}),
        )
        self._agents: Dict[str, _EchoAgent] = {}
        self._lock = threading.Lock()
        self.installed = False

    def metadata(self) -> RuntimeMetadata:
        return self._metadata

    def install(self, config: InstallConfig) -> None:
        self.installed = True
        logger.debug(f"{self.display_name} installed (image={config.image})")

    def start(self, config: AgentConfig) -> AgentHandle:
        handle = AgentHandle(
            id=derive_agent_id(self._metadata.runtime, config.name),
            name=config.name,
            runtime=self._metadata.runtime,
        )
        with self._lock:
            agent = self._agents.get(handle.id)
            if agent is None:
                agent = _EchoAgent(handle=handle, config=dict(config.options))
                self._agents[handle.id] = agent
            agent.running = True
            if config.model:
                agent.config["model"] = config.model
        return handle

    def stop(self, handle: AgentHandle) -> None:
        with self._lock:
            self._get(handle).running = False

    def restart(self, handle: AgentHandle) -> None:
        with self._lock:
            self._get(handle).running = True

    def health(self, handle: AgentHandle) -> HealthStatus:
        with self._lock:
            agent = self._get(handle)
            return HealthStatus.HEALTHY if agent.running else HealthStatus.UNKNOWN

    def metrics(self, handle: AgentHandle) -> AgentMetrics:
        with self._lock:
            self._get(handle)
        return AgentMetrics.zeroed()

    def send(self, handle: AgentHandle, message: AgentMessage) -> AgentResponse:
        with self._lock:
            agent = self._get(handle)
            if not agent.running:
                raise BackendUnreachableError(f"agent {handle.id} is not running")
            agent.history.append(message)
        return AgentResponse(content=f"{self.display_name} echo: {message.content}")

    def subscribe(self, handle: AgentHandle, event: str) -> Iterator[Event]:
        """Replay received messages for the "message" event; nothing otherwise."""
        with self._lock:
            history = list(self._get(handle).history)
        if event != "message":
            return iter(())
        return ({"event": "message", "role": m.role, "content": m.content} for m in history)

    def get_config(self, handle: AgentHandle) -> RuntimeConfig:
        with self._lock:
            values = dict(self._get(handle).config)
        values["runtime"] = self._metadata.runtime
        return RuntimeConfig(values=values)

    def set_config(self, handle: AgentHandle, config: RuntimeConfig) -> None:
        with self._lock:
            self._get(handle).config.update(config.values)

    def list_skills(self, handle: AgentHandle) -> List[Skill]:
        with self._lock:
            return list(self._get(handle).skills)

    def install_skill(self, handle: AgentHandle, skill: SkillManifest) -> None:
        runtimes = {normalize_runtime(r) for r in skill.runtimes}
        if runtimes and self._metadata.runtime not in runtimes:
            raise AdapterError(
                f"skill {skill.name} does not target runtime {self._metadata.runtime}"
            )
        with self._lock:
            agent = self._get(handle)
            agent.skills = [s for s in agent.skills if s.name != skill.name]
            agent.skills.append(Skill(name=skill.name, version=skill.version))

    def _get(self, handle: AgentHandle) -> _EchoAgent:
        # Caller holds the lock
        agent = self._agents.get(handle.id)
        if agent is None:
            raise AgentNotFoundError(handle.id)
        return agent
