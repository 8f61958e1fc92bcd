"""
Process-backed runtime adapter.

Runs each agent as a local process through the ProcessManager. Agents are
keyed by handle id, so one runtime can host several named agents, each with
its own PID record and log file.
"""

import logging
import threading
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from agentfleet.adapters.protocol import Event, RuntimeAdapter
from agentfleet.core.exceptions import (
    AdapterError,
    AgentNotFoundError,
    MessagingNotSupportedError,
)
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
from agentfleet.runtime_process import ProcessManager, resolve_executable
from agentfleet.support.env import build_runtime_env


logger = logging.getLogger(__name__)

DEFAULT_LOG_TAIL = 200


class ProcessAdapter(RuntimeAdapter):
    """Adapter for runtimes that are a local executable with no control API."""

    def __init__(
        self,
        runtime: str,
        manager: ProcessManager,
        executable: Optional[str] = None,
        args: Sequence[str] = (),
        env: Optional[Mapping[str, str]] = None,
        version: str = "unknown",
        language: str = "unknown",
        capabilities: Iterable[str] = (),
        default_port: Optional[int] = None,
        config_format: Optional[str] = None,
        channel_support: Optional[Mapping[ChannelType, ChannelSupport]] = None,
    ):
        runtime = normalize_runtime(runtime)
        self.manager = manager
        self.executable = executable
        self.args = list(args)
        self.env = dict(env or {})
        self._metadata = RuntimeMetadata(
            runtime=runtime,
            version=version,
            language=language,
            capabilities=frozenset(capabilities),
            default_port=default_port,
            config_format=config_format,
            channel_support=dict(channel_support or {}),
        )
        self._handles: Dict[str, AgentHandle] = {}
        self._agent_env: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()

    def metadata(self) -> RuntimeMetadata:
        return self._metadata

    def install(self, config: InstallConfig) -> None:
        """Pin the executable and arguments; the executable must already exist."""
        executable = config.executable or self.executable
        if not executable:
            raise AdapterError(f"no executable configured for {self.runtime}")
        self.executable = str(resolve_executable(executable))
        if config.args:
            self.args = list(config.args)
        logger.info(f"Runtime {self.runtime} installed at {self.executable}")

    def start(self, config: AgentConfig) -> AgentHandle:
        if not self.executable:
            raise AdapterError(f"no executable configured for {self.runtime}")

        handle = AgentHandle(
            id=derive_agent_id(self.runtime, config.name),
            name=config.name,
            runtime=self.runtime,
        )
        agent_env = {str(k): str(v) for k, v in config.options.get("env", {}).items()}
        if config.model:
            agent_env["AGENTFLEET_MODEL"] = config.model

        self._spawn(handle, agent_env)
        with self._lock:
            self._handles[handle.id] = handle
            self._agent_env[handle.id] = agent_env
        return handle

    def stop(self, handle: AgentHandle) -> None:
        self._require(handle)
        self.manager.stop(handle.id)

    def restart(self, handle: AgentHandle) -> None:
        self._require(handle)
        self.manager.stop(handle.id)
        with self._lock:
            agent_env = dict(self._agent_env.get(handle.id, {}))
        self._spawn(handle, agent_env)

    def health(self, handle: AgentHandle) -> HealthStatus:
        info = self.manager.get_process(handle.id)
        if info is None:
            return HealthStatus.UNKNOWN
        if self.manager.is_pid_running(info.pid):
            return HealthStatus.HEALTHY
        return HealthStatus.UNHEALTHY

    def metrics(self, handle: AgentHandle) -> AgentMetrics:
        return AgentMetrics.zeroed()

    def send(self, handle: AgentHandle, message: AgentMessage) -> AgentResponse:
        raise MessagingNotSupportedError(self.runtime)

    def subscribe(self, handle: AgentHandle, event: str) -> Iterator[Event]:
        """Yield the agent's recent log lines for the "log" event."""
        if event != "log":
            return iter(())
        text = self.manager.tail_logs(handle.id, DEFAULT_LOG_TAIL)
        return ({"event": "log", "line": line} for line in text.splitlines())

    def get_config(self, handle: AgentHandle) -> RuntimeConfig:
        self._require(handle)
        return RuntimeConfig(
            values={
                "executable": self.executable,
                "args": list(self.args),
                "env": sorted(self.env),
            }
        )

    def set_config(self, handle: AgentHandle, config: RuntimeConfig) -> None:
        """Update args/env for the next (re)start of this runtime."""
        self._require(handle)
        if "args" in config.values:
            self.args = [str(a) for a in config.values["args"]]
        if "env" in config.values and isinstance(config.values["env"], dict):
            self.env.update({str(k): str(v) for k, v in config.values["env"].items()})

    def list_skills(self, handle: AgentHandle) -> List[Skill]:
        self._require(handle)
        return []

    def install_skill(self, handle: AgentHandle, skill: SkillManifest) -> None:
        raise AdapterError(f"{self.runtime} does not support skill installation")

    def _spawn(self, handle: AgentHandle, agent_env: Mapping[str, str]) -> None:
        """Start the agent process; per-agent variables win over runtime-wide ones."""
        overrides = dict(self.env)
        overrides.update(agent_env)
        self.manager.start_direct(
            handle.id,
            self.executable,
            args=self.args,
            env=build_runtime_env(overrides=overrides),
        )

    def _require(self, handle: AgentHandle) -> AgentHandle:
        with self._lock:
            known = self._handles.get(handle.id)
        if known is None:
            raise AgentNotFoundError(handle.id)
        return known
