"""Core domain model: runtime metadata, agent handles, process and channel records."""

from dataclasses import dataclass, field, asdict
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional


# ============================================================================
# Enumerations
# ============================================================================


class ChannelType(str, Enum):
    """External messaging surfaces an agent can be reached through."""

    TELEGRAM = "telegram"
    DISCORD = "discord"
    SLACK = "slack"
    WHATSAPP = "whatsapp"
    SIGNAL = "signal"
    MATRIX = "matrix"
    EMAIL = "email"
    FEISHU = "feishu"
    DINGTALK = "dingtalk"
    MATTERMOST = "mattermost"
    IRC = "irc"
    TEAMS = "teams"
    IMESSAGE = "imessage"
    GOOGLE_CHAT = "google_chat"
    QQ = "qq"
    LINE = "line"
    NOSTR = "nostr"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_str_loose(cls, value: Any) -> Optional["ChannelType"]:
        """Resolve a channel type case-insensitively, accepting known aliases.

        Args:
            value: Channel type name, alias, or an existing ChannelType.

        Returns:
            The matching ChannelType, or None if unrecognized.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        key = _CHANNEL_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None


_CHANNEL_ALIASES = {
    "lark": "feishu",
    "googlechat": "google_chat",
}


class ExecutionMode(str, Enum):
    """How a runtime process is hosted."""

    DOCKER = "docker"
    DIRECT = "direct"
    AUTO = "auto"

    @classmethod
    def parse(cls, value: Any) -> "ExecutionMode":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


class ChannelBindingStatus(str, Enum):
    ACTIVE = "active"
    DRAINING = "draining"
    RELEASED = "released"


class ChannelConnectionStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    RATE_LIMITED = "rate_limited"
    PROXIED = "proxied"


# ============================================================================
# Runtime metadata
# ============================================================================


@dataclass(frozen=True)
class ChannelSupport:
    """How a runtime supports a channel: natively, via a mechanism, or not at all."""

    kind: str
    mechanism: Optional[str] = None

    NATIVE = "native"
    VIA = "via"
    UNSUPPORTED = "unsupported"

    def __post_init__(self):
        if self.kind not in (self.NATIVE, self.VIA, self.UNSUPPORTED):
            raise ValueError(f"Invalid channel support kind '{self.kind}'")
        if self.kind == self.VIA and not self.mechanism:
            raise ValueError("Via channel support requires a mechanism name")

    @classmethod
    def native(cls) -> "ChannelSupport":
        return cls(cls.NATIVE)

    @classmethod
    def via(cls, mechanism: str) -> "ChannelSupport":
        return cls(cls.VIA, mechanism)

    @classmethod
    def unsupported(cls) -> "ChannelSupport":
        return cls(cls.UNSUPPORTED)

    @property
    def is_supported(self) -> bool:
        return self.kind in (self.NATIVE, self.VIA)

    def to_dict(self) -> Dict[str, Any]:
        if self.kind == self.VIA:
            return {"via": self.mechanism}
        return {"kind": self.kind}


@dataclass(frozen=True)
class RuntimeMetadata:
    """Static descriptor of a runtime backend. Immutable once produced."""

    runtime: str
    version: str
    language: str
    capabilities: FrozenSet[str] = frozenset()
    default_port: Optional[int] = None
    config_format: Optional[str] = None
    channel_support: Mapping[ChannelType, ChannelSupport] = field(
        default_factory=dict
    )

    def __post_init__(self):
        object.__setattr__(self, "capabilities", frozenset(self.capabilities))
        object.__setattr__(
            self, "channel_support", MappingProxyType(dict(self.channel_support))
        )

    def supports_capability(self, capability: str) -> bool:
        """Case-insensitive capability membership check."""
        wanted = capability.lower()
        return any(candidate.lower() == wanted for candidate in self.capabilities)

    def support_for(self, channel: ChannelType) -> Optional[ChannelSupport]:
        return self.channel_support.get(channel)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "runtime": self.runtime,
            "version": self.version,
            "language": self.language,
            "capabilities": sorted(self.capabilities),
            "default_port": self.default_port,
            "config_format": self.config_format,
            "channel_support": {
                channel.value: support.to_dict()
                for channel, support in sorted(
                    self.channel_support.items(), key=lambda item: item[0].value
                )
            },
        }


# ============================================================================
# Adapter payloads
# ============================================================================


@dataclass(frozen=True)
class AgentHandle:
    """Identifies one running agent instance."""

    id: str
    name: str
    runtime: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InstallConfig:
    runtime: str
    image: Optional[str] = None
    executable: Optional[str] = None
    args: List[str] = field(default_factory=list)


@dataclass
class AgentConfig:
    name: str
    runtime: str
    model: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AgentMetrics:
    cpu_percent: float = 0.0
    memory_mb: float = 0.0
    queue_depth: int = 0

    @classmethod
    def zeroed(cls) -> "AgentMetrics":
        return cls()


@dataclass
class AgentMessage:
    role: str
    content: str


@dataclass
class AgentResponse:
    content: str


@dataclass
class RuntimeConfig:
    values: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Skill:
    name: str
    version: str


@dataclass
class SkillManifest:
    name: str
    version: str
    runtimes: List[str] = field(default_factory=list)


# ============================================================================
# Process records
# ============================================================================


@dataclass
class ProcessInfo:
    """Persisted record for a directly-spawned runtime process."""

    runtime: str
    pid: int
    started_at_unix_ms: int
    mode: ExecutionMode
    log_path: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProcessInfo":
        return cls(
            runtime=data["runtime"],
            pid=int(data["pid"]),
            started_at_unix_ms=int(data["started_at_unix_ms"]),
            mode=ExecutionMode.parse(data["mode"]),
            log_path=str(data["log_path"]),
        )


@dataclass
class RuntimeProcessStatus:
    runtime: str
    pid: Optional[int]
    running: bool
    mode: ExecutionMode
    log_path: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        return data


# ============================================================================
# Channel records
# ============================================================================


@dataclass
class ChannelInstanceConfig:
    """Named configuration of one messaging channel instance."""

    instance_name: str
    channel_type: ChannelType
    # Secrets stay out of repr() so they never reach log output.
    credentials: Dict[str, str] = field(default_factory=dict, repr=False)
    options: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self, include_credentials: bool = False) -> Dict[str, Any]:
        data = {
            "instance_name": self.instance_name,
            "channel_type": self.channel_type.value,
            "options": dict(self.options),
        }
        if include_credentials:
            data["credentials"] = dict(self.credentials)
        else:
            data["credentials"] = sorted(self.credentials)
        return data


@dataclass
class ChannelBinding:
    """A hashed credential claimed by one agent instance for one channel type."""

    instance_id: str
    channel_type: ChannelType
    bot_token_hash: str
    status: ChannelBindingStatus
    bound_at_unix_ms: int

    @property
    def key(self) -> tuple:
        return (self.channel_type.value, self.bot_token_hash)

    @property
    def is_active(self) -> bool:
        return self.status == ChannelBindingStatus.ACTIVE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "channel_type": self.channel_type.value,
            "bot_token_hash": self.bot_token_hash,
            "status": self.status.value,
            "bound_at_unix_ms": self.bound_at_unix_ms,
        }


def channel_support_map(
    native: Iterable[ChannelType] = (),
    via: Optional[Mapping[ChannelType, str]] = None,
) -> Dict[ChannelType, ChannelSupport]:
    """Build a channel support mapping from native channels and via-mechanisms."""
    support = {channel: ChannelSupport.native() for channel in native}
    for channel, mechanism in (via or {}).items():
        support[channel] = ChannelSupport.via(mechanism)
    return support
