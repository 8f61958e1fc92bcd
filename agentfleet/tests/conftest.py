"""
Shared fixtures for the agentfleet test suite.

Fixtures here are available to every test category (core, store, adapters,
swarm, cli). Category-specific fixtures live next to their tests.
"""

import pytest

from agentfleet.adapters.echo import EchoAdapter
from agentfleet.adapters.registry import AdapterRegistry
from agentfleet.core.models import ChannelType, channel_support_map
from agentfleet.runtime_process import ProcessManager


@pytest.fixture
def fleet_home(tmp_path, monkeypatch):
    """Point AGENTFLEET_HOME at a temporary directory."""
    home = tmp_path / "fleet"
    monkeypatch.setenv("AGENTFLEET_HOME", str(home))
    return home


@pytest.fixture
def process_manager(fleet_home):
    """Direct-mode manager with short stop polling."""
    manager = ProcessManager(
        mode="direct", root_dir=fleet_home, poll_interval=0.05, poll_attempts=10
    )
    yield manager
    for status in manager.list_statuses():
        manager.stop(status.runtime)
    manager.close()


@pytest.fixture
def echo_adapter():
    return EchoAdapter(
        "zeroclaw",
        display_name="ZeroClaw",
        capabilities=("chat", "reasoning"),
        channel_support=channel_support_map(
            native=(ChannelType.TELEGRAM,),
            via={ChannelType.WHATSAPP: "Meta Cloud API"},
        ),
    )


@pytest.fixture
def registry(echo_adapter):
    registry = AdapterRegistry()
    registry.register("zeroclaw", echo_adapter)
    registry.register(
        "picoclaw",
        EchoAdapter("picoclaw", display_name="PicoClaw", capabilities=("chat", "embedded")),
    )
    return registry
