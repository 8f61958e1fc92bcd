"""Core exceptions: fleet error hierarchy shared by every component."""


class FleetError(Exception):
    """Base exception for fleet orchestration errors."""

    pass


# ============================================================================
# Not-found errors
# ============================================================================


class NotFoundError(FleetError):
    """Raised when a named entity does not exist."""

    pass


class AgentNotFoundError(NotFoundError):
    """Raised when an agent handle or id is unknown."""

    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        super().__init__(f"agent '{agent_id}' not found")


class RuntimeNotRegisteredError(NotFoundError):
    """Raised when no adapter is registered for a runtime."""

    def __init__(self, runtime: str):
        self.runtime = runtime
        super().__init__(f"runtime '{runtime}' is not registered")


class TeamNotFoundError(NotFoundError):
    """Raised when a swarm team does not exist."""

    def __init__(self, team_name: str):
        self.team_name = team_name
        super().__init__(f"team '{team_name}' not found")


class TaskNotFoundError(NotFoundError):
    """Raised when a swarm task does not exist."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"task '{task_id}' not found")


class BindingNotFoundError(NotFoundError):
    """Raised when a channel binding cannot be located."""

    pass


# ============================================================================
# Conflict errors
# ============================================================================


class ConflictError(FleetError):
    """Raised when an operation would violate a uniqueness or membership rule."""

    pass


class BindingConflictError(ConflictError):
    """Raised when a credential is already actively bound to another instance."""

    def __init__(self, channel_type: str, owner_instance_id: str):
        self.channel_type = channel_type
        self.owner_instance_id = owner_instance_id
        super().__init__(f"token already bound to instance {owner_instance_id}")


class NoWorkersError(ConflictError):
    """Raised when a fan-out targets a team with no leader or worker members."""

    def __init__(self, team_name: str):
        self.team_name = team_name
        super().__init__(f"team '{team_name}' has no workers")


class InvalidTransitionError(ConflictError):
    """Raised when an agent state change is not allowed by the lifecycle."""

    def __init__(self, agent_id: str, from_state: str, to_state: str):
        self.agent_id = agent_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid state transition for {agent_id}: {from_state} -> {to_state}"
        )


# ============================================================================
# Environment errors
# ============================================================================


class EnvironmentConfigError(FleetError):
    """Raised when the host environment lacks something an operation needs."""

    pass


class ExecutableNotFoundError(NotFoundError, EnvironmentConfigError):
    """Raised when a runtime executable does not exist on disk."""

    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(f"runtime executable not found: {executable}")


class ConfigError(FleetError):
    """Raised when the declarative fleet configuration is invalid."""

    pass


class UnknownChannelTypeError(FleetError, ValueError):
    """Raised when a channel type string cannot be resolved."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"unknown channel type: {value}")


# ============================================================================
# Adapter errors
# ============================================================================


class AdapterError(FleetError):
    """Base for errors raised by runtime adapters."""

    pass


class MessagingNotSupportedError(AdapterError):
    """Raised when a backend does not implement interactive messaging."""

    def __init__(self, runtime: str):
        self.runtime = runtime
        super().__init__(f"{runtime} does not support send")


class BackendUnreachableError(AdapterError):
    """Raised when a backend cannot be reached over its transport."""

    pass
