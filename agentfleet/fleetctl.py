#!/usr/bin/env python3
"""
fleetctl: agent fleet control CLI.

Commands:
  up        Start runtimes declared in fleet.yaml as local processes
  ps        Show recorded runtime processes and whether they are alive
  stop      Stop one runtime, or all of them
  logs      Print the tail of a runtime's log
  runtimes  List known runtimes, or find one by capability
  channels  Summarize channel instances and report credential conflicts
  teams     List swarm teams, or preview a task fan-out
  discover  Probe hosts for open runtime ports
"""

import argparse
import logging
import sys

from agentfleet.cli import FleetCLI
from agentfleet.constants import DEFAULT_FLEET_FILE, DEFAULT_TAIL_LINES
from agentfleet.core.exceptions import FleetError
from agentfleet.discovery import DEFAULT_PROBE_TIMEOUT_SEC


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fleetctl", description="Agent fleet control CLI"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--home", help="Fleet state directory (default: $AGENTFLEET_HOME or ~/.agentfleet)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # 'up' command
    up_parser = subparsers.add_parser("up", help="Start runtimes from fleet.yaml")
    up_parser.add_argument("runtimes", nargs="*", help="Runtimes to start (default: all)")
    up_parser.add_argument(
        "-f", "--file", default=DEFAULT_FLEET_FILE, help="Fleet file path"
    )
    up_parser.add_argument(
        "--no-docker",
        action="store_true",
        help="Run runtimes directly even if docker is available",
    )

    # 'ps' command
    ps_parser = subparsers.add_parser("ps", help="Show runtime processes")
    ps_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # 'stop' command
    stop_parser = subparsers.add_parser("stop", help="Stop runtimes")
    stop_parser.add_argument("runtime", nargs="?", help="Runtime to stop (default: all)")

    # 'logs' command
    logs_parser = subparsers.add_parser("logs", help="Tail a runtime log")
    logs_parser.add_argument("runtime", help="Runtime name")
    logs_parser.add_argument(
        "-n",
        "--lines",
        type=int,
        default=DEFAULT_TAIL_LINES,
        help=f"Number of lines (default: {DEFAULT_TAIL_LINES})",
    )

    # 'runtimes' command
    runtimes_parser = subparsers.add_parser("runtimes", help="List known runtimes")
    runtimes_parser.add_argument(
        "--capability", help="Print the runtime that provides this capability"
    )
    runtimes_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # 'channels' command
    channels_parser = subparsers.add_parser(
        "channels", help="Summarize channels and binding conflicts"
    )
    channels_parser.add_argument(
        "-f", "--file", default=DEFAULT_FLEET_FILE, help="Fleet file path"
    )
    channels_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # 'teams' command
    teams_parser = subparsers.add_parser("teams", help="List swarm teams")
    teams_parser.add_argument("team", nargs="?", help="Team to plan a fan-out for")
    teams_parser.add_argument(
        "-f", "--file", default=DEFAULT_FLEET_FILE, help="Fleet file path"
    )
    teams_parser.add_argument("--task", default="", help="Parent task description")
    teams_parser.add_argument(
        "--subtask", action="append", help="Subtask description (repeatable)"
    )
    teams_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # 'discover' command
    discover_parser = subparsers.add_parser("discover", help="Probe for runtime endpoints")
    discover_parser.add_argument(
        "hosts", nargs="*", default=["127.0.0.1"], help="Hosts to probe (default: 127.0.0.1)"
    )
    discover_parser.add_argument(
        "-p", "--port", type=int, action="append", help="Port to probe (repeatable)"
    )
    discover_parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_PROBE_TIMEOUT_SEC,
        help=f"Connect timeout in seconds (default: {DEFAULT_PROBE_TIMEOUT_SEC})",
    )
    discover_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def main(argv=None):
    """Main entry point for fleetctl CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        cli = FleetCLI(root_dir=args.home)
    except FleetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "up":
        return cli.cmd_up(args)
    elif args.command == "ps":
        return cli.cmd_ps(args)
    elif args.command == "stop":
        return cli.cmd_stop(args)
    elif args.command == "logs":
        return cli.cmd_logs(args)
    elif args.command == "runtimes":
        return cli.cmd_runtimes(args)
    elif args.command == "channels":
        return cli.cmd_channels(args)
    elif args.command == "teams":
        return cli.cmd_teams(args)
    elif args.command == "discover":
        return cli.cmd_discover(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
