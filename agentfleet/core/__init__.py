"""Core package: centralized domain model, lifecycle, exceptions, and naming helpers."""

from agentfleet.core.models import (
    AgentConfig,
    AgentHandle,
    AgentMessage,
    AgentMetrics,
    AgentResponse,
    ChannelBinding,
    ChannelBindingStatus,
    ChannelConnectionStatus,
    ChannelInstanceConfig,
    ChannelSupport,
    ChannelType,
    ExecutionMode,
    HealthStatus,
    InstallConfig,
    ProcessInfo,
    RuntimeConfig,
    RuntimeMetadata,
    RuntimeProcessStatus,
    Skill,
    SkillManifest,
    channel_support_map,
)
from agentfleet.core.lifecycle import AgentState, can_transition
from agentfleet.core.exceptions import (
    FleetError,
    NotFoundError,
    ConflictError,
    EnvironmentConfigError,
    AdapterError,
)
from agentfleet.core.naming import (
    derive_agent_id,
    normalize_runtime,
    now_unix_ms,
)

__all__ = [
    "AgentConfig",
    "AgentHandle",
    "AgentMessage",
    "AgentMetrics",
    "AgentResponse",
    "AgentState",
    "ChannelBinding",
    "ChannelBindingStatus",
    "ChannelConnectionStatus",
    "ChannelInstanceConfig",
    "ChannelSupport",
    "ChannelType",
    "ExecutionMode",
    "HealthStatus",
    "InstallConfig",
    "ProcessInfo",
    "RuntimeConfig",
    "RuntimeMetadata",
    "RuntimeProcessStatus",
    "Skill",
    "SkillManifest",
    "channel_support_map",
    "can_transition",
    "FleetError",
    "NotFoundError",
    "ConflictError",
    "EnvironmentConfigError",
    "AdapterError",
    "derive_agent_id",
    "normalize_runtime",
    "now_unix_ms",
]
