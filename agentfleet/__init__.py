"""Agentfleet: orchestration core for a fleet of heterogeneous agent runtimes."""

from agentfleet import adapters
from agentfleet.adapters.registry import AdapterRegistry
from agentfleet.discovery import DiscoveryService
from agentfleet.fleet import FleetManager
from agentfleet.proxy import needs_proxy, proxy_status, relay
from agentfleet.runtime_process import ProcessManager
from agentfleet.store import AuditLog, ChannelStore
from agentfleet.swarm import SwarmCoordinator

__all__ = [
    "AdapterRegistry",
    "AuditLog",
    "ChannelStore",
    "DiscoveryService",
    "FleetManager",
    "ProcessManager",
    "SwarmCoordinator",
    "adapters",
    "needs_proxy",
    "proxy_status",
    "relay",
]
