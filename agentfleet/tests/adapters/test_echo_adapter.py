"""
Unit tests for the in-process echo adapter.
"""

import pytest

from agentfleet.adapters.echo import EchoAdapter
from agentfleet.adapters.protocol import RuntimeAdapter
from agentfleet.core.exceptions import AdapterError, AgentNotFoundError, BackendUnreachableError
from agentfleet.core.models import (
    AgentConfig,
    AgentHandle,
    AgentMessage,
    HealthStatus,
    RuntimeConfig,
    SkillManifest,
)


@pytest.fixture
def started(echo_adapter):
    handle = echo_adapter.start(AgentConfig(name="Support Bot", runtime="zeroclaw"))
    return echo_adapter, handle


class TestEchoLifecycle:
    """Test start/stop/health of echo agents."""

    def test_is_runtime_adapter(self, echo_adapter):
        assert isinstance(echo_adapter, RuntimeAdapter)
        assert echo_adapter.runtime == "zeroclaw"

    def test_start_derives_handle_id(self, started):
        _, handle = started
        assert handle.id == "zeroclaw-support-bot"
        assert handle.runtime == "zeroclaw"

    def test_repeated_start_same_id(self, started):
        adapter, handle = started
        again = adapter.start(AgentConfig(name="Support Bot", runtime="zeroclaw"))
        assert again == handle

    def test_health_follows_running(self, started):
        adapter, handle = started
        assert adapter.health(handle) == HealthStatus.HEALTHY
        adapter.stop(handle)
        assert adapter.health(handle) == HealthStatus.UNKNOWN
        adapter.restart(handle)
        assert adapter.health(handle) == HealthStatus.HEALTHY

    def test_unknown_handle(self, echo_adapter):
        with pytest.raises(AgentNotFoundError):
            echo_adapter.stop(AgentHandle(id="zeroclaw-ghost", name="ghost", runtime="zeroclaw"))

    def test_metrics_zeroed(self, started):
        adapter, handle = started
        metrics = adapter.metrics(handle)
        assert metrics.cpu_percent == 0.0
        assert metrics.queue_depth == 0


class TestEchoMessaging:
    """Test send and subscribe."""

    def test_send_echoes(self, started):
        adapter, handle = started
        response = adapter.send(handle, AgentMessage(role="user", content="hello"))
        assert response.content == "ZeroClaw echo: hello"

    def test_send_to_stopped_agent(self, started):
        adapter, handle = started
        adapter.stop(handle)
        with pytest.raises(BackendUnreachableError):
            adapter.send(handle, AgentMessage(role="user", content="hello"))

    def test_subscribe_replays_messages(self, started):
        adapter, handle = started
        adapter.send(handle, AgentMessage(role="user", content="one"))
        events = list(adapter.subscribe(handle, "message"))
        assert events == [{"event": "message", "role": "user", "content": "one"}]
        assert list(adapter.subscribe(handle, "log")) == []


class TestEchoConfigAndSkills:
    """Test config and skill management."""

    def test_config_roundtrip(self, started):
        adapter, handle = started
        adapter.set_config(handle, RuntimeConfig(values={"temperature": 0.2}))
        values = adapter.get_config(handle).values
        assert values["temperature"] == 0.2
        assert values["runtime"] == "zeroclaw"

    def test_install_skill_replaces_same_name(self, started):
        adapter, handle = started
        adapter.install_skill(handle, SkillManifest(name="search", version="1"))
        adapter.install_skill(handle, SkillManifest(name="search", version="2"))
        skills = adapter.list_skills(handle)
        assert [(s.name, s.version) for s in skills] == [("search", "2")]

    def test_install_skill_for_other_runtime(self, started):
        adapter, handle = started
        with pytest.raises(AdapterError):
            adapter.install_skill(
                handle, SkillManifest(name="gpio", version="1", runtimes=["picoclaw"])
            )

    def test_display_name_defaults_to_runtime(self):
        adapter = EchoAdapter("nullclaw")
        handle = adapter.start(AgentConfig(name="a", runtime="nullclaw"))
        assert adapter.send(handle, AgentMessage("user", "x")).content == "nullclaw echo: x"
