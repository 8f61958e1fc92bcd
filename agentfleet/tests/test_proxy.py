"""
Unit tests for channel proxy routing.
"""

from unittest.mock import Mock

import pytest

from agentfleet.core.exceptions import MessagingNotSupportedError
from agentfleet.core.models import (
    AgentConfig,
    AgentHandle,
    AgentResponse,
    ChannelSupport,
    ChannelType,
    RuntimeMetadata,
)
from agentfleet.proxy import (
    create_proxy_message,
    format_proxy_response,
    needs_proxy,
    proxy_status,
    relay,
)


@pytest.fixture
def metadata():
    return RuntimeMetadata(
        runtime="zeroclaw",
        version="unknown",
        language="rust",
        channel_support={
            ChannelType.TELEGRAM: ChannelSupport.native(),
            ChannelType.WHATSAPP: ChannelSupport.via("Meta Cloud API"),
            ChannelType.TEAMS: ChannelSupport.unsupported(),
        },
    )


class TestNeedsProxy:
    """Truth table for the proxy decision."""

    @pytest.mark.parametrize(
        "channel, expected",
        [
            (ChannelType.TELEGRAM, False),
            (ChannelType.WHATSAPP, False),
            (ChannelType.TEAMS, True),
            (ChannelType.QQ, True),
        ],
    )
    def test_decision(self, metadata, channel, expected):
        assert needs_proxy(metadata, channel) is expected

    def test_status_for_native(self, metadata):
        status = proxy_status(metadata, ChannelType.TELEGRAM)
        assert status.is_proxied is False
        assert status.reason is None
        assert status.channel_type == "telegram"

    def test_status_for_missing(self, metadata):
        status = proxy_status(metadata, ChannelType.QQ)
        assert status.is_proxied is True
        assert status.reason == "zeroclaw does not natively support qq; the fleet will proxy"


class TestProxyMessages:
    """Test message wrapping and relaying."""

    def test_create_proxy_message(self):
        message = create_proxy_message(ChannelType.TELEGRAM, "alice", "hi")
        assert message.role == "proxy:telegram"
        assert message.content == "[alice] hi"

    def test_format_response(self):
        assert format_proxy_response(AgentResponse(content="pong")) == "pong"

    def test_relay_through_echo(self, echo_adapter):
        handle = echo_adapter.start(AgentConfig(name="Support", runtime="zeroclaw"))
        reply = relay(echo_adapter, handle, ChannelType.TEAMS, "bob", "status?")
        assert reply == "ZeroClaw echo: [bob] status?"

    def test_relay_propagates_adapter_error(self):
        adapter = Mock()
        adapter.send.side_effect = MessagingNotSupportedError("openclaw")
        handle = AgentHandle(id="openclaw-a", name="a", runtime="openclaw")
        with pytest.raises(MessagingNotSupportedError):
            relay(adapter, handle, ChannelType.SLACK, "carol", "hello")
