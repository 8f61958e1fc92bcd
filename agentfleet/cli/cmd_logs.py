"""
fleetctl logs command implementation.
"""

import sys
import argparse


def cmd_logs(cli_instance, args: argparse.Namespace) -> int:
    """Print the tail of a runtime's log.

    Args:
        cli_instance: FleetCLI instance with process manager
        args: Parsed command-line arguments with: runtime, lines

    Returns:
        Exit code (0 on success, 1 on error)
    """
    try:
        text = cli_instance.manager.tail_logs(args.runtime, args.lines)
        if text:
            print(text)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
