"""
Unit tests for core models and naming helpers.
"""

import pytest

from agentfleet.core.models import (
    ChannelInstanceConfig,
    ChannelSupport,
    ChannelType,
    ExecutionMode,
    ProcessInfo,
    RuntimeMetadata,
    channel_support_map,
)
from agentfleet.core.naming import derive_agent_id, normalize_runtime, safe_name


class TestChannelType:
    """Test loose channel type parsing."""

    def test_case_insensitive(self):
        assert ChannelType.from_str_loose("Telegram") == ChannelType.TELEGRAM

    def test_aliases(self):
        assert ChannelType.from_str_loose("lark") == ChannelType.FEISHU
        assert ChannelType.from_str_loose("googlechat") == ChannelType.GOOGLE_CHAT
        assert ChannelType.from_str_loose("google_chat") == ChannelType.GOOGLE_CHAT

    def test_unknown_returns_none(self):
        assert ChannelType.from_str_loose("carrier-pigeon") is None
        assert ChannelType.from_str_loose(None) is None

    def test_str_is_value(self):
        assert str(ChannelType.WHATSAPP) == "whatsapp"


class TestChannelSupport:
    """Test channel support descriptors."""

    def test_via_requires_mechanism(self):
        with pytest.raises(ValueError):
            ChannelSupport(ChannelSupport.VIA)

    def test_is_supported(self):
        assert ChannelSupport.native().is_supported
        assert ChannelSupport.via("signal-cli").is_supported
        assert not ChannelSupport.unsupported().is_supported

    def test_support_map(self):
        support = channel_support_map(
            native=[ChannelType.SLACK], via={ChannelType.SIGNAL: "signal-cli"}
        )
        assert support[ChannelType.SLACK] == ChannelSupport.native()
        assert support[ChannelType.SIGNAL].mechanism == "signal-cli"


class TestRuntimeMetadata:
    """Test runtime metadata immutability and lookups."""

    def test_capability_case_insensitive(self):
        meta = RuntimeMetadata("zeroclaw", "1.0", "rust", capabilities={"Chat"})
        assert meta.supports_capability("chat")
        assert not meta.supports_capability("tools")

    def test_channel_support_is_read_only(self):
        meta = RuntimeMetadata(
            "zeroclaw",
            "1.0",
            "rust",
            channel_support={ChannelType.SLACK: ChannelSupport.native()},
        )
        with pytest.raises(TypeError):
            meta.channel_support[ChannelType.IRC] = ChannelSupport.native()

    def test_to_dict(self):
        meta = RuntimeMetadata(
            "openclaw",
            "unknown",
            "typescript",
            capabilities={"tools", "chat"},
            default_port=18789,
            channel_support={ChannelType.WHATSAPP: ChannelSupport.via("Baileys")},
        )
        data = meta.to_dict()
        assert data["capabilities"] == ["chat", "tools"]
        assert data["channel_support"] == {"whatsapp": {"via": "Baileys"}}


class TestExecutionMode:
    def test_parse(self):
        assert ExecutionMode.parse("DIRECT") == ExecutionMode.DIRECT
        assert ExecutionMode.parse(ExecutionMode.AUTO) == ExecutionMode.AUTO

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            ExecutionMode.parse("kubernetes")


class TestRecords:
    def test_process_info_from_dict(self):
        info = ProcessInfo.from_dict(
            {
                "runtime": "zeroclaw",
                "pid": "42",
                "started_at_unix_ms": 1,
                "mode": "direct",
                "log_path": "/tmp/zeroclaw.log",
            }
        )
        assert info.pid == 42
        assert info.to_dict()["mode"] == "direct"

    def test_credentials_hidden(self):
        config = ChannelInstanceConfig(
            "support", ChannelType.TELEGRAM, credentials={"bot_token": "secret"}
        )
        assert "secret" not in repr(config)
        assert config.to_dict()["credentials"] == ["bot_token"]
        assert config.to_dict(include_credentials=True)["credentials"] == {
            "bot_token": "secret"
        }


class TestNaming:
    def test_derive_agent_id_deterministic(self):
        assert derive_agent_id("ZeroClaw", "Support Bot") == "zeroclaw-support-bot"
        assert derive_agent_id("zeroclaw", "Support Bot") == derive_agent_id(
            "zeroclaw", "Support Bot"
        )

    def test_normalize_runtime_rejects_empty(self):
        with pytest.raises(ValueError):
            normalize_runtime("  ")

    def test_safe_name_fallback(self):
        assert safe_name("///", "runtime") == "runtime"
        assert safe_name("a b/c") == "a-b-c"
