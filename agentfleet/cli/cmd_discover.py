"""
fleetctl discover command implementation.

Probes hosts for open runtime ports. Without explicit ports, each registered
runtime's default port is probed and found endpoints carry that runtime as
their hint.
"""

import sys
import json
import argparse


def cmd_discover(cli_instance, args: argparse.Namespace) -> int:
    """Probe hosts and list the endpoints that accepted a connection.

    Args:
        cli_instance: FleetCLI instance with adapter registry and discovery service
        args: Parsed command-line arguments with: hosts (list), port (list,
            optional), timeout, json (optional)

    Returns:
        Exit code (0 on success, 1 if there was nothing to probe)
    """
    discovery = cli_instance.discovery

    if args.port:
        targets = [(port, None) for port in args.port]
    else:
        targets = [
            (meta.default_port, meta.runtime)
            for meta in cli_instance.registry.list_metadata()
            if meta.default_port is not None
        ]
    if not targets:
        print("Error: no ports to probe", file=sys.stderr)
        return 1

    for port, runtime in targets:
        discovery.probe_ports(args.hosts, [port], timeout=args.timeout, runtime_hint=runtime)

    endpoints = discovery.list_endpoints()
    if args.json:
        print(json.dumps([e.to_dict() for e in endpoints], indent=2))
        return 0

    if not endpoints:
        print("No endpoints found")
        return 0
    for endpoint in endpoints:
        print(f"{endpoint.key:<24} {endpoint.runtime_hint or '-'}")
    return 0
