"""
Audit log: append-only, lock-protected sequence of control-plane events.
"""

import logging
import threading
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from agentfleet.core.naming import now_unix_ms


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditEvent:
    actor: str
    action: str
    target: str
    timestamp_unix_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class AuditLog:
    """Thread-safe in-memory audit trail preserving append order."""

    def __init__(self):
        self._events: List[AuditEvent] = []
        self._lock = threading.Lock()

    def append(self, event: AuditEvent) -> None:
        with self._lock:
            self._events.append(event)

    def list(self) -> List[AuditEvent]:
        """Snapshot of all events in append order."""
        with self._lock:
            return list(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


def append_audit(
    audit: Optional[AuditLog], actor: str, action: str, target: str
) -> Optional[AuditEvent]:
    """Stamp and append an event; a missing audit log is tolerated."""
    if audit is None:
        return None
    event = AuditEvent(
        actor=actor,
        action=action,
        target=target,
        timestamp_unix_ms=now_unix_ms(),
    )
    audit.append(event)
    logger.debug(f"audit: {actor} {action} {target}")
    return event
