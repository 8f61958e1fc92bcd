"""Runtime adapters for fleet orchestration.

- agentfleet.adapters.protocol: RuntimeAdapter contract
- agentfleet.adapters.registry: runtime id -> adapter lookup
- agentfleet.adapters.echo: in-process echo backend
- agentfleet.adapters.process: local-process backend via ProcessManager
- agentfleet.adapters.catalog: known runtimes and the default registry
"""

from agentfleet.adapters import protocol
from agentfleet.adapters.catalog import KNOWN_RUNTIMES, build_default_registry
from agentfleet.adapters.echo import EchoAdapter
from agentfleet.adapters.process import ProcessAdapter
from agentfleet.adapters.protocol import RuntimeAdapter
from agentfleet.adapters.registry import AdapterRegistry

__all__ = [
    "protocol",
    "AdapterRegistry",
    "EchoAdapter",
    "KNOWN_RUNTIMES",
    "ProcessAdapter",
    "RuntimeAdapter",
    "build_default_registry",
]
