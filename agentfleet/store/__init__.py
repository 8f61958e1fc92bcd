"""
Store layer for channel state and the audit trail.

Canonical exports:
- ChannelStore: channel configs, credential bindings, assignments, connection status
- AuditLog / append_audit: append-only control-plane event log
"""

from agentfleet.store.audit import AuditEvent, AuditLog, append_audit
from agentfleet.store.channels import (
    BindingConflict,
    ChannelStore,
    ChannelTypeSummary,
    MatrixCell,
    MatrixRow,
    hash_token,
    resolve_channel_type,
)

__all__ = [
    "AuditEvent",
    "AuditLog",
    "BindingConflict",
    "ChannelStore",
    "ChannelTypeSummary",
    "MatrixCell",
    "MatrixRow",
    "append_audit",
    "hash_token",
    "resolve_channel_type",
]
