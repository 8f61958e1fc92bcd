"""
Channel store: channel instance configs, credential bindings, per-agent
assignments, and the live connection-status matrix.

Raw bot tokens are hashed with SHA-256 on entry and never stored or logged.
"""

import hashlib
import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from agentfleet.core.exceptions import (
    BindingConflictError,
    BindingNotFoundError,
    UnknownChannelTypeError,
)
from agentfleet.core.models import (
    ChannelBinding,
    ChannelBindingStatus,
    ChannelConnectionStatus,
    ChannelInstanceConfig,
    ChannelType,
)
from agentfleet.core.naming import now_unix_ms


logger = logging.getLogger(__name__)

ChannelTypeLike = Union[ChannelType, str]


@dataclass
class BindingConflict:
    """Same credential actively bound to more than one instance."""

    channel_type: str
    bot_token_hash: str
    instance_ids: List[str]


@dataclass
class ChannelTypeSummary:
    channel_type: str
    instance_count: int = 0
    connected: int = 0
    disconnected: int = 0


@dataclass
class MatrixCell:
    agent_id: str
    runtime: str
    status: ChannelConnectionStatus


@dataclass
class MatrixRow:
    channel_instance: str
    channel_type: str
    cells: List[MatrixCell] = field(default_factory=list)


def hash_token(token: str) -> str:
    """Irreversibly hash a raw credential to its hex SHA-256 digest."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def resolve_channel_type(value: ChannelTypeLike) -> ChannelType:
    """Resolve a loosely-typed channel name or raise UnknownChannelTypeError."""
    channel_type = ChannelType.from_str_loose(value)
    if channel_type is None:
        raise UnknownChannelTypeError(str(value))
    return channel_type


class ChannelStore:
    """Thread-safe in-memory store for channel configuration and ownership."""

    def __init__(self):
        self._lock = threading.RLock()
        # instance_name -> config
        self._configs: Dict[str, ChannelInstanceConfig] = {}
        # Insertion-ordered; positional ids used by unbind() index into it.
        self._bindings: List[ChannelBinding] = []
        # agent_id -> channel instance names
        self._assignments: Dict[str, List[str]] = {}
        # (agent_id, channel instance name) -> status
        self._connection_status: Dict[Tuple[str, str], ChannelConnectionStatus] = {}

    # ------------------------------------------------------------------
    # Channel configs
    # ------------------------------------------------------------------

    def upsert_config(
        self,
        instance_name: str,
        channel_type: ChannelTypeLike,
        credentials: Optional[Dict[str, str]] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> ChannelInstanceConfig:
        """
        Create or overwrite a channel instance config.

        Raises:
            UnknownChannelTypeError: If channel_type cannot be resolved.
        """
        config = ChannelInstanceConfig(
            instance_name=instance_name,
            channel_type=resolve_channel_type(channel_type),
            credentials=dict(credentials or {}),
            options=dict(options or {}),
        )
        with self._lock:
            self._configs[instance_name] = config
        logger.debug(f"Upserted channel config {instance_name} ({config.channel_type})")
        return config

    def get_config(self, instance_name: str) -> Optional[ChannelInstanceConfig]:
        with self._lock:
            return self._configs.get(instance_name)

    def delete_config(self, instance_name: str) -> bool:
        """Remove a config. Returns True if it existed."""
        with self._lock:
            return self._configs.pop(instance_name, None) is not None

    def list_configs(self) -> List[ChannelInstanceConfig]:
        """All configs, sorted by instance name."""
        with self._lock:
            return [self._configs[name] for name in sorted(self._configs)]

    def list_configs_by_type(
        self, channel_type: ChannelTypeLike
    ) -> List[ChannelInstanceConfig]:
        wanted = resolve_channel_type(channel_type)
        return [c for c in self.list_configs() if c.channel_type == wanted]

    def list_channel_summaries(self) -> List[ChannelTypeSummary]:
        """
        Summarize configured instances per channel type.

        Connected counts statuses CONNECTED and PROXIED; every other recorded
        status counts as disconnected.
        """
        with self._lock:
            summaries: Dict[str, ChannelTypeSummary] = {}
            for config in self._configs.values():
                key = config.channel_type.value
                summary = summaries.setdefault(key, ChannelTypeSummary(key))
                summary.instance_count += 1

            for (_, channel_name), status in self._connection_status.items():
                config = self._configs.get(channel_name)
                if config is None:
                    continue
                summary = summaries[config.channel_type.value]
                if status in (
                    ChannelConnectionStatus.CONNECTED,
                    ChannelConnectionStatus.PROXIED,
                ):
                    summary.connected += 1
                else:
                    summary.disconnected += 1

        return [summaries[key] for key in sorted(summaries)]

    # ------------------------------------------------------------------
    # Bindings
    # ------------------------------------------------------------------

    def bind(
        self, instance_id: str, channel_type: ChannelTypeLike, bot_token: str
    ) -> ChannelBinding:
        """
        Claim a credential for an agent instance.

        Rebinding the same instance to the same credential overwrites the
        existing record.

        Args:
            instance_id: Agent instance claiming the credential.
            channel_type: Channel type (loosely matched).
            bot_token: Raw credential; hashed immediately.

        Returns:
            The Active binding.

        Raises:
            UnknownChannelTypeError: If channel_type cannot be resolved.
            BindingConflictError: If the credential is actively bound to a
                different instance.
        """
        resolved = resolve_channel_type(channel_type)
        token_hash = hash_token(bot_token)
        key = (resolved.value, token_hash)

        with self._lock:
            index = self._find_binding_index(key)
            if index is not None:
                existing = self._bindings[index]
                if existing.is_active and existing.instance_id != instance_id:
                    logger.warning(
                        f"Rejected {resolved} bind for {instance_id}: token {token_hash[:8]} "
                        f"owned by {existing.instance_id}"
                    )
                    raise BindingConflictError(resolved.value, existing.instance_id)

            binding = ChannelBinding(
                instance_id=instance_id,
                channel_type=resolved,
                bot_token_hash=token_hash,
                status=ChannelBindingStatus.ACTIVE,
                bound_at_unix_ms=now_unix_ms(),
            )
            if index is None:
                self._bindings.append(binding)
            else:
                self._bindings[index] = binding

        logger.info(f"Bound {resolved} token {token_hash[:8]} to {instance_id}")
        return binding

    def unbind(self, binding_id: int) -> ChannelBinding:
        """
        Release a binding by its position in list_bindings().

        Positions shift when other bindings are added, so prefer
        unbind_token() when the credential is known.

        Raises:
            BindingNotFoundError: If the position is out of range.
        """
        with self._lock:
            if binding_id < 0 or binding_id >= len(self._bindings):
                raise BindingNotFoundError(f"binding {binding_id} not found")
            binding = self._bindings[binding_id]
            binding.status = ChannelBindingStatus.RELEASED
            return binding

    def unbind_token(
        self, channel_type: ChannelTypeLike, bot_token: str
    ) -> ChannelBinding:
        """
        Release the binding for a (channel type, credential) pair.

        Raises:
            BindingNotFoundError: If the credential was never bound.
        """
        resolved = resolve_channel_type(channel_type)
        key = (resolved.value, hash_token(bot_token))
        with self._lock:
            index = self._find_binding_index(key)
            if index is None:
                raise BindingNotFoundError(f"no {resolved} binding for this token")
            binding = self._bindings[index]
            binding.status = ChannelBindingStatus.RELEASED
            return binding

    def restore_binding(self, binding: ChannelBinding) -> None:
        """
        Load a previously persisted binding record as-is.

        The uniqueness check in bind() is not applied; detect_conflicts()
        reports any duplicates introduced this way.
        """
        with self._lock:
            self._bindings.append(binding)

    def list_bindings(self) -> List[ChannelBinding]:
        with self._lock:
            return list(self._bindings)

    def detect_conflicts(self) -> List[BindingConflict]:
        """
        Group active bindings by (channel type, token hash) and report every
        group owned by more than one distinct instance.
        """
        groups: Dict[Tuple[str, str], List[str]] = defaultdict(list)
        with self._lock:
            for binding in self._bindings:
                if not binding.is_active:
                    continue
                owners = groups[binding.key]
                if binding.instance_id not in owners:
                    owners.append(binding.instance_id)

        return [
            BindingConflict(
                channel_type=channel_type,
                bot_token_hash=token_hash,
                instance_ids=instance_ids,
            )
            for (channel_type, token_hash), instance_ids in sorted(groups.items())
            if len(instance_ids) > 1
        ]

    def _find_binding_index(self, key: Tuple[str, str]) -> Optional[int]:
        """Index of the binding for key, preferring an Active one (lock held)."""
        fallback = None
        for index, binding in enumerate(self._bindings):
            if binding.key != key:
                continue
            if binding.is_active:
                return index
            if fallback is None:
                fallback = index
        return fallback

    # ------------------------------------------------------------------
    # Assignments
    # ------------------------------------------------------------------

    def assign_channel(self, agent_id: str, channel_instance_name: str) -> None:
        """Assign a channel instance to an agent (idempotent)."""
        with self._lock:
            names = self._assignments.setdefault(agent_id, [])
            if channel_instance_name not in names:
                names.append(channel_instance_name)

    def unassign_channel(self, agent_id: str, channel_instance_name: str) -> None:
        """Remove a channel instance from an agent; no-op for non-members."""
        with self._lock:
            names = self._assignments.get(agent_id)
            if names is not None:
                names[:] = [n for n in names if n != channel_instance_name]

    def get_agent_channels(self, agent_id: str) -> List[ChannelInstanceConfig]:
        """Configs assigned to an agent; names without a config are skipped."""
        with self._lock:
            names = self._assignments.get(agent_id, [])
            return [self._configs[n] for n in names if n in self._configs]

    # ------------------------------------------------------------------
    # Connection status
    # ------------------------------------------------------------------

    def set_connection_status(
        self,
        agent_id: str,
        channel_name: str,
        status: Union[ChannelConnectionStatus, str],
    ) -> None:
        with self._lock:
            self._connection_status[(agent_id, channel_name)] = ChannelConnectionStatus(
                status
            )

    def get_connection_status(
        self, agent_id: str, channel_name: str
    ) -> ChannelConnectionStatus:
        with self._lock:
            return self._connection_status.get(
                (agent_id, channel_name), ChannelConnectionStatus.DISCONNECTED
            )

    def build_matrix(self, agents: Iterable[Tuple[str, str]]) -> List[MatrixRow]:
        """
        Build the channel x runtime connectivity matrix.

        Args:
            agents: (agent_id, runtime) pairs, one column each.

        Returns:
            One row per configured channel instance (sorted by name), with one
            cell per agent in the order given.
        """
        agents = list(agents)
        rows = []
        with self._lock:
            for config in self.list_configs():
                cells = [
                    MatrixCell(
                        agent_id=agent_id,
                        runtime=runtime,
                        status=self.get_connection_status(
                            agent_id, config.instance_name
                        ),
                    )
                    for agent_id, runtime in agents
                ]
                rows.append(
                    MatrixRow(
                        channel_instance=config.instance_name,
                        channel_type=config.channel_type.value,
                        cells=cells,
                    )
                )
        return rows
