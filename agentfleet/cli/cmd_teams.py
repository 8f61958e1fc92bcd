"""
fleetctl teams command implementation.

Loads the teams declared in fleet.yaml into a swarm coordinator, lists them,
and optionally previews how a task would fan out across one team.
"""

import sys
import json
import argparse

from agentfleet.core.exceptions import FleetError
from agentfleet.support.config import load_fleet_config
from agentfleet.swarm import SwarmCoordinator


def load_coordinator(config) -> SwarmCoordinator:
    """Create a SwarmCoordinator holding every team of a FleetConfig."""
    coordinator = SwarmCoordinator()
    for team in config.teams:
        coordinator.create_team(team.name, team.members)
    return coordinator


def cmd_teams(cli_instance, args: argparse.Namespace) -> int:
    """List swarm teams, or plan a fan-out for one team.

    Args:
        cli_instance: FleetCLI instance
        args: Parsed command-line arguments with: file, team (optional),
            task, subtask (list), json (optional)

    Returns:
        Exit code (0 on success, 1 on error)
    """
    try:
        coordinator = load_coordinator(load_fleet_config(args.file))

        if args.team:
            subtasks = coordinator.fan_out(args.team, args.task, args.subtask or [])
            # Fresh coordinator: the parent is the only top-level task
            parent = coordinator.list_tasks()[0]
            if args.json:
                print(json.dumps([t.to_dict() for t in coordinator.list_tasks()], indent=2))
                return 0
            print(f"{parent.id} -> {parent.assigned_to}: {parent.description}")
            for task in subtasks:
                print(f"  {task.id} -> {task.assigned_to}: {task.description}")
            return 0

        teams = coordinator.list_teams()
        if args.json:
            print(json.dumps([t.to_dict() for t in teams], indent=2))
            return 0
        if not teams:
            print("No teams configured")
            return 0
        for team in teams:
            leader = team.leader()
            workers = ", ".join(m.agent_id for m in team.workers()) or "-"
            print(
                f"{team.name:<16} leader={leader.agent_id if leader else '-'} "
                f"workers={workers}"
            )
        return 0

    except FleetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
