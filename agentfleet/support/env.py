"""
Environment variable helpers for runtime process management.

Builds filtered environments for directly-spawned runtime processes so a
runtime only sees the essentials plus the keys it declares.
"""

import os
from typing import Dict, Iterable, Optional


SAFE_KEYS = [
    "PATH",
    "HOME",
    "USER",
    "SHELL",
    "TERM",
    "LANG",
    "LC_ALL",
    "PWD",
    "TMPDIR",
]


def build_safe_env(extra_keys: Optional[Iterable[str]] = None) -> Dict[str, str]:
    """Build safe environment variables for subprocess execution.

    Args:
        extra_keys: Additional environment keys to include if present.

    Returns:
        Dictionary of environment variables suitable for subprocess.Popen().
    """
    keys = list(SAFE_KEYS)
    if extra_keys:
        keys.extend(extra_keys)

    # Only include keys that exist
    return {k: os.environ[k] for k in keys if k in os.environ}


def build_runtime_env(
    pass_keys: Optional[Iterable[str]] = None,
    overrides: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """Build environment for a directly-spawned runtime process.

    Args:
        pass_keys: Keys copied from the orchestrator's environment when set
            (typically credential variables named in fleet.yaml).
        overrides: Explicit values that win over inherited ones.

    Returns:
        Dictionary of environment variables.
    """
    env = build_safe_env(extra_keys=pass_keys)
    if overrides:
        env.update({str(k): str(v) for k, v in overrides.items()})
    return env
