"""
fleetctl runtimes command implementation.

Shows metadata of the registered runtime adapters, or resolves which
runtime serves a capability.
"""

import sys
import json
import argparse


def cmd_runtimes(cli_instance, args: argparse.Namespace) -> int:
    """List runtimes or look one up by capability.

    Args:
        cli_instance: FleetCLI instance with adapter registry
        args: Parsed command-line arguments with: capability (optional),
            json (optional)

    Returns:
        Exit code (0 on success, 1 if no runtime serves the capability)
    """
    registry = cli_instance.registry

    if args.capability:
        runtime = registry.detect_runtime_for_capability(args.capability)
        if runtime is None:
            print(f"No runtime provides capability: {args.capability}", file=sys.stderr)
            return 1
        print(runtime)
        return 0

    metadata = registry.list_metadata()
    if args.json:
        print(json.dumps([m.to_dict() for m in metadata], indent=2))
        return 0

    for meta in metadata:
        capabilities = ", ".join(sorted(meta.capabilities)) or "-"
        port = meta.default_port if meta.default_port is not None else "-"
        print(f"{meta.runtime:<12} {meta.language:<12} port={port:<6} [{capabilities}]")
    return 0
