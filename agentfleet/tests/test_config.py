"""
Unit tests for fleet.yaml parsing.
"""

import pytest

from agentfleet.core.exceptions import ConfigError
from agentfleet.core.models import ChannelType, ExecutionMode
from agentfleet.support.config import load_fleet_config, parse_fleet_config
from agentfleet.swarm import SwarmRole


FLEET_YAML = """
mode: direct
runtimes:
  ZeroClaw:
    executable: /usr/local/bin/zeroclaw
    args: [daemon, --port, 42617]
    env: [OPENAI_API_KEY]
  picoclaw:
    executable: picoclaw
    env:
      PICO_MODE: edge
channels:
  support-telegram:
    type: telegram
    instance: zeroclaw-support
    runtime: ZeroClaw
    credentials:
      bot_token: TG_TOKEN
  ops-lark:
    type: lark
teams:
  research:
    - {agent: zeroclaw-lead, role: leader}
    - {agent: picoclaw-a}
"""


class TestParseFleetConfig:
    """Test parsing of each section."""

    def test_full_document(self):
        config = parse_fleet_config(FLEET_YAML)
        assert config.mode == ExecutionMode.DIRECT

        zeroclaw = config.runtimes["zeroclaw"]
        assert zeroclaw.args == ["daemon", "--port", "42617"]
        assert zeroclaw.env_keys == ["OPENAI_API_KEY"]
        assert config.runtimes["picoclaw"].env == {"PICO_MODE": "edge"}

        channels = {c.instance_name: c for c in config.channels}
        assert channels["support-telegram"].instance_id == "zeroclaw-support"
        assert channels["ops-lark"].channel_type == ChannelType.FEISHU
        assert channels["support-telegram"].runtime == "zeroclaw"
        assert channels["ops-lark"].runtime is None

        team = config.teams[0]
        assert team.name == "research"
        assert [m.role for m in team.members] == [SwarmRole.LEADER, SwarmRole.WORKER]

    def test_empty_document(self):
        config = parse_fleet_config("")
        assert config.mode == ExecutionMode.AUTO
        assert config.runtimes == {}
        assert config.channels == []

    def test_invalid_yaml(self):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            parse_fleet_config("runtimes: [unclosed")

    def test_not_a_dictionary(self):
        with pytest.raises(ConfigError):
            parse_fleet_config("- a\n- b\n")

    def test_invalid_mode(self):
        with pytest.raises(ConfigError, match="execution mode"):
            parse_fleet_config("mode: kubernetes")

    def test_unknown_channel_type(self):
        with pytest.raises(ConfigError, match="unknown channel type"):
            parse_fleet_config("channels:\n  x:\n    type: fax\n")

    def test_unknown_role(self):
        with pytest.raises(ConfigError, match="unknown role"):
            parse_fleet_config("teams:\n  t:\n    - {agent: a, role: boss}\n")

    def test_args_must_be_list(self):
        with pytest.raises(ConfigError):
            parse_fleet_config("runtimes:\n  zeroclaw:\n    args: daemon\n")


class TestCredentials:
    """Test credential resolution from the environment."""

    def test_resolve_from_environ(self):
        channel = parse_fleet_config(FLEET_YAML).channels[0]
        assert channel.resolve_credentials({"TG_TOKEN": "123:abc"}) == {"bot_token": "123:abc"}

    def test_missing_variable_skipped(self):
        channel = parse_fleet_config(FLEET_YAML).channels[0]
        assert channel.resolve_credentials({}) == {}


class TestLoadFleetConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_fleet_config(tmp_path / "fleet.yaml")

    def test_load(self, tmp_path):
        path = tmp_path / "fleet.yaml"
        path.write_text(FLEET_YAML)
        assert "zeroclaw" in load_fleet_config(path).runtimes
