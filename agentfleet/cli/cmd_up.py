"""
fleetctl up command implementation.

Starts the runtimes declared in fleet.yaml as direct-mode processes.
"""

import sys
import argparse

from agentfleet.core.exceptions import FleetError
from agentfleet.core.models import ExecutionMode
from agentfleet.support.config import load_fleet_config
from agentfleet.support.env import build_runtime_env


def cmd_up(cli_instance, args: argparse.Namespace) -> int:
    """Start runtimes from the fleet file.

    Args:
        cli_instance: FleetCLI instance with process manager
        args: Parsed command-line arguments with: file, runtimes (optional),
            no_docker

    Returns:
        Exit code (0 on success, 1 if any runtime failed to start)
    """
    try:
        config = load_fleet_config(args.file)
    except FleetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    manager = cli_instance.manager
    manager.mode = config.mode
    mode = manager.resolve_mode(force_no_docker=args.no_docker)
    if mode == ExecutionMode.DOCKER:
        print(
            "Error: docker mode is handled by the container engine; "
            "pass --no-docker to run runtimes directly",
            file=sys.stderr,
        )
        return 1

    names = args.runtimes or sorted(config.runtimes)
    failed = 0
    for name in names:
        spec = config.runtimes.get(name.lower())
        if spec is None:
            print(f"Error: runtime '{name}' is not declared in {args.file}", file=sys.stderr)
            failed += 1
            continue
        if not spec.executable:
            print(f"Error: runtime '{name}' has no executable", file=sys.stderr)
            failed += 1
            continue
        if manager.is_running(spec.name):
            print(f"{spec.name} already running")
            continue

        try:
            info = manager.start_direct(
                spec.name,
                spec.executable,
                args=spec.args,
                env=build_runtime_env(pass_keys=spec.env_keys, overrides=spec.env),
            )
        except FleetError as e:
            print(f"Error: {spec.name}: {e}", file=sys.stderr)
            failed += 1
            continue
        print(f"Started {spec.name} (pid {info.pid})")

    return 1 if failed else 0
