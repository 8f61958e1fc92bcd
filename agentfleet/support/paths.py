"""
Path helpers for fleet state and log directory management.

Provides utilities for deriving the per-user fleet root, the PID record and
log directories, and ensuring the directory structure exists.
"""

import os
from pathlib import Path
from typing import Optional, Union

from agentfleet.constants import (
    DEFAULT_FLEET_DIRNAME,
    FLEET_HOME_ENV,
    LOG_DIRNAME,
    STATE_DIRNAME,
)
from agentfleet.core.exceptions import EnvironmentConfigError


def get_fleet_root() -> Path:
    """Get the absolute path to the per-user fleet directory.

    Resolution order: $AGENTFLEET_HOME, then $HOME/.agentfleet.

    Returns:
        Absolute Path to the fleet root.

    Raises:
        EnvironmentConfigError: If neither variable is set.
    """
    override = os.environ.get(FLEET_HOME_ENV)
    if override:
        return Path(override).expanduser().resolve()

    home = os.environ.get("HOME")
    if not home:
        raise EnvironmentConfigError("HOME environment variable is not set")
    return Path(home) / DEFAULT_FLEET_DIRNAME


def get_state_dir(root: Optional[Union[str, Path]] = None) -> Path:
    """Directory holding one PID record per runtime: <root>/run"""
    return Path(root or get_fleet_root()) / STATE_DIRNAME


def get_log_dir(root: Optional[Union[str, Path]] = None) -> Path:
    """Directory holding one append-only log per runtime: <root>/logs"""
    return Path(root or get_fleet_root()) / LOG_DIRNAME


def ensure_fleet_dirs(root: Optional[Union[str, Path]] = None) -> Path:
    """Ensure the fleet root, state and log directories exist.

    Returns:
        The fleet root path.
    """
    root_path = Path(root or get_fleet_root())
    get_state_dir(root_path).mkdir(parents=True, exist_ok=True)
    get_log_dir(root_path).mkdir(parents=True, exist_ok=True)
    return root_path
