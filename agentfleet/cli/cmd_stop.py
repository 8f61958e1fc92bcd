"""
fleetctl stop command implementation.

Stops one runtime, or every recorded runtime when none is named.
"""

import sys
import argparse


def cmd_stop(cli_instance, args: argparse.Namespace) -> int:
    """Stop runtime processes.

    Args:
        cli_instance: FleetCLI instance with process manager
        args: Parsed command-line arguments with: runtime (optional)

    Returns:
        Exit code (0 on success, 1 on error)
    """
    manager = cli_instance.manager
    try:
        if args.runtime:
            names = [args.runtime]
        else:
            names = [s.runtime for s in manager.list_statuses()]

        for name in names:
            if manager.stop(name):
                print(f"Stopped {name}")
            else:
                print(f"{name} was not running")
        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
