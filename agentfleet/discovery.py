"""
Endpoint discovery: known hosts that may run an agent runtime.

Endpoints are registered manually, by DNS-SD announcements, or by network
scans. probe_ports() performs real TCP connects; scan_ports() only matches
against what is already known.
"""

import logging
import socket
import threading
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT_SEC = 0.5


class DiscoveryMethod(str, Enum):
    MANUAL = "manual"
    NETWORK_SCAN = "network_scan"
    DNS_SD = "dns_sd"


@dataclass(frozen=True)
class DiscoveredEndpoint:
    host: str
    port: int
    method: DiscoveryMethod = DiscoveryMethod.MANUAL
    runtime_hint: Optional[str] = None

    @property
    def key(self) -> str:
        return endpoint_key(self.host, self.port)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["method"] = self.method.value
        return data


def endpoint_key(host: str, port: int) -> str:
    return f"{host}:{port}"


class DiscoveryService:
    """Thread-safe table of known endpoints keyed by "host:port"."""

    def __init__(self):
        self._endpoints: Dict[str, DiscoveredEndpoint] = {}
        self._lock = threading.Lock()

    def register_endpoint(self, endpoint: DiscoveredEndpoint) -> str:
        """Add or replace an endpoint; returns its "host:port" key."""
        with self._lock:
            self._endpoints[endpoint.key] = endpoint
        logger.debug(f"Registered endpoint {endpoint.key} ({endpoint.method.value})")
        return endpoint.key

    def remove_endpoint(self, key: str) -> bool:
        with self._lock:
            return self._endpoints.pop(key, None) is not None

    def list_endpoints(self) -> List[DiscoveredEndpoint]:
        with self._lock:
            return sorted(self._endpoints.values(), key=lambda e: (e.host, e.port))

    def scan_ports(self, hosts: Iterable[str], ports: Iterable[int]) -> List[DiscoveredEndpoint]:
        """Known endpoints on the host x port grid, in grid order."""
        ports = list(ports)
        results = []
        with self._lock:
            for host in hosts:
                for port in ports:
                    endpoint = self._endpoints.get(endpoint_key(host, port))
                    if endpoint is not None:
                        results.append(endpoint)
        return results

    def discover_dns_sd(self) -> List[DiscoveredEndpoint]:
        """Endpoints that were announced over DNS-SD."""
        return [e for e in self.list_endpoints() if e.method == DiscoveryMethod.DNS_SD]

    def probe_ports(
        self,
        hosts: Iterable[str],
        ports: Iterable[int],
        timeout: float = DEFAULT_PROBE_TIMEOUT_SEC,
        runtime_hint: Optional[str] = None,
    ) -> List[DiscoveredEndpoint]:
        """
        Attempt TCP connects across the grid and register every open port.

        An endpoint already known under another method keeps that method.

        Args:
            hosts: Hosts to probe.
            ports: Ports to probe on each host.
            timeout: Per-connect timeout in seconds.
            runtime_hint: Runtime name recorded on newly found endpoints.

        Returns:
            Endpoints that accepted a connection, in grid order.
        """
        ports = list(ports)
        found = []
        for host in hosts:
            for port in ports:
                if not _port_open(host, port, timeout):
                    continue
                key = endpoint_key(host, port)
                with self._lock:
                    endpoint = self._endpoints.get(key)
                    if endpoint is None:
                        endpoint = DiscoveredEndpoint(
                            host=host,
                            port=port,
                            method=DiscoveryMethod.NETWORK_SCAN,
                            runtime_hint=runtime_hint,
                        )
                        self._endpoints[key] = endpoint
                found.append(endpoint)
        logger.info(f"Probe found {len(found)} open endpoint(s)")
        return found


def _port_open(host: str, port: int, timeout: float) -> bool:
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False
