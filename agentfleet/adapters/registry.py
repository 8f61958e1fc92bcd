"""Adapter registry: runtime identifier -> adapter instance lookup."""

import logging
import threading
from typing import Dict, List, Optional

from agentfleet.adapters.protocol import RuntimeAdapter
from agentfleet.core.models import RuntimeMetadata
from agentfleet.core.naming import normalize_runtime


logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Thread-safe registry for discovering and swapping runtime adapters.

    Callers receive shared references to adapter instances; a reference taken
    before a dynamic replacement keeps working against the old adapter.
    """

    def __init__(self):
        self._adapters: Dict[str, RuntimeAdapter] = {}
        self._lock = threading.RLock()

    def register(self, runtime: str, adapter: RuntimeAdapter) -> None:
        """Register an adapter at startup.

        Args:
            runtime: Runtime identifier (e.g., 'zeroclaw').
            adapter: The adapter instance.
        """
        key = normalize_runtime(runtime)
        with self._lock:
            self._adapters[key] = adapter
        logger.debug(f"Registered adapter for {key}")

    def register_dynamic(self, runtime: str, adapter: RuntimeAdapter) -> bool:
        """Register or hot-swap an adapter while the fleet is running.

        Args:
            runtime: Runtime identifier.
            adapter: Replacement adapter instance.

        Returns:
            True if a prior adapter for this runtime was displaced.
        """
        key = normalize_runtime(runtime)
        with self._lock:
            displaced = key in self._adapters
            self._adapters[key] = adapter
        if displaced:
            logger.info(f"Replaced adapter for {key}")
        else:
            logger.info(f"Registered adapter for {key}")
        return displaced

    def unregister(self, runtime: str) -> bool:
        """Remove an adapter. Returns True if one was registered."""
        key = normalize_runtime(runtime)
        with self._lock:
            return self._adapters.pop(key, None) is not None

    def get(self, runtime: str) -> Optional[RuntimeAdapter]:
        """Retrieve a registered adapter, or None if not registered."""
        key = normalize_runtime(runtime)
        with self._lock:
            return self._adapters.get(key)

    def has(self, runtime: str) -> bool:
        key = normalize_runtime(runtime)
        with self._lock:
            return key in self._adapters

    def adapters_map(self) -> Dict[str, RuntimeAdapter]:
        """Snapshot copy of the runtime -> adapter mapping."""
        with self._lock:
            return dict(self._adapters)

    def list(self) -> List[str]:
        """List registered runtime identifiers, sorted."""
        with self._lock:
            return sorted(self._adapters)

    def list_metadata(self) -> List[RuntimeMetadata]:
        """Metadata of every registered adapter, sorted by runtime identifier."""
        return [adapter.metadata() for _, adapter in sorted(self.adapters_map().items())]

    def detect_runtime_for_capability(self, capability: str) -> Optional[str]:
        """Find a registered runtime whose capabilities include `capability`.

        Matching is case-insensitive. When several runtimes qualify the first
        one in registration order wins; callers needing a specific backend
        must pin the runtime explicitly.

        Returns:
            Runtime identifier, or None if no adapter serves the capability.
        """
        for runtime, adapter in self.adapters_map().items():
            if adapter.metadata().supports_capability(capability):
                return runtime
        return None

    def detect_available(self) -> List[RuntimeMetadata]:
        """Metadata for every adapter currently registered."""
        return [adapter.metadata() for adapter in self.adapters_map().values()]
