"""Catalog of known runtimes and the default registry built from it."""

from typing import Dict, Optional

from agentfleet.adapters.echo import EchoAdapter
from agentfleet.adapters.registry import AdapterRegistry
from agentfleet.core.models import ChannelType, channel_support_map


KNOWN_RUNTIMES: Dict[str, Dict] = {
    "zeroclaw": {
        "display_name": "ZeroClaw",
        "language": "rust",
        "capabilities": ("chat", "reasoning"),
        "default_port": 42617,
        "config_format": "toml",
        "channel_support": channel_support_map(
            native=(
                ChannelType.TELEGRAM,
                ChannelType.DISCORD,
                ChannelType.SLACK,
                ChannelType.SIGNAL,
                ChannelType.FEISHU,
                ChannelType.MATRIX,
                ChannelType.EMAIL,
                ChannelType.MATTERMOST,
                ChannelType.IRC,
                ChannelType.IMESSAGE,
                ChannelType.NOSTR,
            ),
            via={ChannelType.WHATSAPP: "Meta Cloud API"},
        ),
    },
    "openclaw": {
        "display_name": "OpenClaw",
        "language": "typescript",
        "capabilities": ("chat", "tools"),
        "default_port": 18789,
        "config_format": "json5",
        "channel_support": channel_support_map(
            native=(
                ChannelType.TELEGRAM,
                ChannelType.DISCORD,
                ChannelType.SLACK,
                ChannelType.FEISHU,
                ChannelType.MATTERMOST,
                ChannelType.IRC,
                ChannelType.TEAMS,
                ChannelType.IMESSAGE,
                ChannelType.GOOGLE_CHAT,
                ChannelType.NOSTR,
            ),
            via={ChannelType.WHATSAPP: "Baileys", ChannelType.SIGNAL: "signal-cli"},
        ),
    },
    "picoclaw": {
        "display_name": "PicoClaw",
        "language": "go",
        "capabilities": ("chat", "embedded"),
        "default_port": None,
        "config_format": "json",
        "channel_support": channel_support_map(
            native=(
                ChannelType.TELEGRAM,
                ChannelType.DISCORD,
                ChannelType.SLACK,
                ChannelType.WHATSAPP,
                ChannelType.FEISHU,
                ChannelType.DINGTALK,
                ChannelType.QQ,
                ChannelType.LINE,
            ),
        ),
    },
}


def build_default_registry(registry: Optional[AdapterRegistry] = None) -> AdapterRegistry:
    """Register an in-process adapter for every catalog runtime.

    Args:
        registry: Registry to populate; a new one is created if None.

    Returns:
        The populated registry.
    """
    registry = registry if registry is not None else AdapterRegistry()
    for runtime, entry in KNOWN_RUNTIMES.items():
        registry.register(runtime, EchoAdapter(runtime, **entry))
    return registry
