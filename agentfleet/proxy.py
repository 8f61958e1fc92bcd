"""
Channel proxy routing.

Decides whether a runtime can serve a channel itself or whether the fleet
must relay the channel's traffic through the runtime's generic send() path,
and builds the relayed messages.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from agentfleet.adapters.protocol import RuntimeAdapter
from agentfleet.core.models import (
    AgentHandle,
    AgentMessage,
    AgentResponse,
    ChannelType,
    RuntimeMetadata,
)


logger = logging.getLogger(__name__)

PROXY_ROLE_PREFIX = "proxy:"


@dataclass
class ProxyStatus:
    channel_type: str
    runtime: str
    is_proxied: bool
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def needs_proxy(metadata: RuntimeMetadata, channel: ChannelType) -> bool:
    """True unless the runtime declares the channel Native or Via a mechanism."""
    support = metadata.support_for(channel)
    return support is None or not support.is_supported


def proxy_status(metadata: RuntimeMetadata, channel: ChannelType) -> ProxyStatus:
    """Package the proxy decision for a runtime x channel pair."""
    proxied = needs_proxy(metadata, channel)
    reason = None
    if proxied:
        reason = (
            f"{metadata.runtime} does not natively support {channel}; "
            f"the fleet will proxy"
        )
    return ProxyStatus(
        channel_type=channel.value,
        runtime=metadata.runtime,
        is_proxied=proxied,
        reason=reason,
    )


def create_proxy_message(
    channel: ChannelType, sender: str, content: str
) -> AgentMessage:
    """
    Wrap an inbound channel message for delivery through send().

    Example: (telegram, "alice", "hi") -> role "proxy:telegram", content "[alice] hi"
    """
    return AgentMessage(
        role=f"{PROXY_ROLE_PREFIX}{channel.value}",
        content=f"[{sender}] {content}",
    )


def format_proxy_response(response: AgentResponse) -> str:
    """Extract the text to relay back to the external channel."""
    return response.content


def relay(
    adapter: RuntimeAdapter,
    handle: AgentHandle,
    channel: ChannelType,
    sender: str,
    content: str,
) -> str:
    """
    Relay one inbound message from a channel through the runtime's send().

    Args:
        adapter: Adapter of the target runtime.
        handle: Target agent.
        channel: Channel the message arrived on.
        sender: Sender identity on that channel.
        content: Message text.

    Returns:
        Reply text for the channel.

    Raises:
        AdapterError: If the backend cannot accept messages.
    """
    message = create_proxy_message(channel, sender, content)
    logger.debug(f"Proxying {channel} message from {sender} to {handle.id}")
    response = adapter.send(handle, message)
    return format_proxy_response(response)
