"""Naming helpers: agent ids, runtime keys, file-safe names, and timestamps."""

import re
import time


def normalize_runtime(runtime: str) -> str:
    """
    Normalize a runtime identifier to its canonical registry key.

    Example: " ZeroClaw " -> "zeroclaw"

    Args:
        runtime: Runtime identifier as supplied by a caller or config file.

    Returns:
        Lowercased, stripped identifier.

    Raises:
        ValueError: If the identifier is empty.
    """
    key = str(runtime).strip().lower()
    if not key:
        raise ValueError("runtime identifier must not be empty")
    return key


def safe_name(value: str, fallback: str = "agent") -> str:
    """Replace characters outside [a-zA-Z0-9_.-] with hyphens."""
    cleaned = re.sub(r"[^a-zA-Z0-9_.-]+", "-", value).strip("-")
    return cleaned or fallback


def derive_agent_id(runtime: str, agent_name: str) -> str:
    """
    Derive a deterministic agent id from runtime and agent name.

    Repeated starts of the same logical agent yield the same id.
    Example: ("zeroclaw", "Support Bot") -> "zeroclaw-support-bot"

    Args:
        runtime: Runtime identifier.
        agent_name: Display name of the agent.

    Returns:
        Agent id in format: <runtime>-<safe-name>
    """
    return f"{normalize_runtime(runtime)}-{safe_name(agent_name.lower())}"


def now_unix_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)
