"""
fleetctl CLI command implementations.

This package contains individual command handlers for the fleetctl CLI.
Each cmd_* module exposes one handler taking (cli_instance, args).

Public API:
- FleetCLI: Facade holding shared state and delegating to command modules
"""

import argparse
from pathlib import Path
from typing import Optional, Union

# Import command modules (not functions) to avoid namespace conflicts
from agentfleet.cli import cmd_up as _cmd_up_module
from agentfleet.cli import cmd_ps as _cmd_ps_module
from agentfleet.cli import cmd_stop as _cmd_stop_module
from agentfleet.cli import cmd_logs as _cmd_logs_module
from agentfleet.cli import cmd_runtimes as _cmd_runtimes_module
from agentfleet.cli import cmd_channels as _cmd_channels_module
from agentfleet.cli import cmd_teams as _cmd_teams_module
from agentfleet.cli import cmd_discover as _cmd_discover_module
from agentfleet.adapters.catalog import build_default_registry
from agentfleet.adapters.registry import AdapterRegistry
from agentfleet.discovery import DiscoveryService
from agentfleet.runtime_process import ProcessManager


class FleetCLI:
    """Fleet CLI interface.

    Holds the process manager, adapter registry and discovery table the
    commands share.
    """

    def __init__(
        self,
        root_dir: Optional[Union[str, Path]] = None,
        registry: Optional[AdapterRegistry] = None,
    ):
        """Initialize CLI; creates the fleet state and log directories."""
        self.manager = ProcessManager(root_dir=root_dir)
        self.registry = registry if registry is not None else build_default_registry()
        self.discovery = DiscoveryService()

    def cmd_up(self, args: argparse.Namespace) -> int:
        """Start runtimes from fleet.yaml (delegates to cmd_up module)."""
        return _cmd_up_module.cmd_up(self, args)

    def cmd_ps(self, args: argparse.Namespace) -> int:
        """Display runtime process statuses (delegates to cmd_ps module)."""
        return _cmd_ps_module.cmd_ps(self, args)

    def cmd_stop(self, args: argparse.Namespace) -> int:
        """Stop one or all runtimes (delegates to cmd_stop module)."""
        return _cmd_stop_module.cmd_stop(self, args)

    def cmd_logs(self, args: argparse.Namespace) -> int:
        """Tail a runtime log (delegates to cmd_logs module)."""
        return _cmd_logs_module.cmd_logs(self, args)

    def cmd_runtimes(self, args: argparse.Namespace) -> int:
        """List registered runtimes (delegates to cmd_runtimes module)."""
        return _cmd_runtimes_module.cmd_runtimes(self, args)

    def cmd_channels(self, args: argparse.Namespace) -> int:
        """Summarize channels and conflicts (delegates to cmd_channels module)."""
        return _cmd_channels_module.cmd_channels(self, args)

    def cmd_teams(self, args: argparse.Namespace) -> int:
        """List teams or plan a fan-out (delegates to cmd_teams module)."""
        return _cmd_teams_module.cmd_teams(self, args)

    def cmd_discover(self, args: argparse.Namespace) -> int:
        """Probe hosts for runtime ports (delegates to cmd_discover module)."""
        return _cmd_discover_module.cmd_discover(self, args)


__all__ = [
    "FleetCLI",
]
