"""
fleetctl ps command implementation.

Lists persisted runtime processes with a fresh liveness check.
"""

import sys
import json
import argparse


def cmd_ps(cli_instance, args: argparse.Namespace) -> int:
    """Display runtime process statuses.

    Args:
        cli_instance: FleetCLI instance with process manager
        args: Parsed command-line arguments with: json (optional)

    Returns:
        Exit code (0 on success, 1 on error)
    """
    try:
        statuses = cli_instance.manager.list_statuses()

        if args.json:
            print(json.dumps([s.to_dict() for s in statuses], indent=2))
            return 0

        if not statuses:
            print("No runtimes recorded")
            return 0

        print(f"{'RUNTIME':<20} {'PID':>8}  {'STATUS':<8} MODE")
        for status in statuses:
            state = "running" if status.running else "exited"
            pid = status.pid if status.pid is not None else "-"
            print(f"{status.runtime:<20} {pid:>8}  {state:<8} {status.mode.value}")
        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
