"""
Unit tests for the adapter registry and runtime catalog.
"""

import threading

from agentfleet.adapters.catalog import KNOWN_RUNTIMES, build_default_registry
from agentfleet.adapters.echo import EchoAdapter
from agentfleet.adapters.registry import AdapterRegistry


class TestAdapterRegistry:
    """Test registration, lookup and hot-swap."""

    def test_register_and_get(self, echo_adapter):
        registry = AdapterRegistry()
        registry.register("ZeroClaw", echo_adapter)
        assert registry.get("zeroclaw") is echo_adapter
        assert registry.has("ZEROCLAW")

    def test_get_unknown_returns_none(self):
        assert AdapterRegistry().get("nullclaw") is None

    def test_register_dynamic_reports_displacement(self, echo_adapter):
        registry = AdapterRegistry()
        assert registry.register_dynamic("zeroclaw", echo_adapter) is False

        replacement = EchoAdapter("zeroclaw", display_name="ZeroClaw v2")
        assert registry.register_dynamic("zeroclaw", replacement) is True
        assert registry.get("zeroclaw") is replacement

    def test_reference_taken_before_swap_keeps_working(self, echo_adapter):
        registry = AdapterRegistry()
        registry.register("zeroclaw", echo_adapter)
        held = registry.get("zeroclaw")

        registry.register_dynamic("zeroclaw", EchoAdapter("zeroclaw"))
        assert held is echo_adapter
        assert held.metadata().runtime == "zeroclaw"

    def test_unregister(self, echo_adapter):
        registry = AdapterRegistry()
        registry.register("zeroclaw", echo_adapter)
        assert registry.unregister("zeroclaw") is True
        assert registry.unregister("zeroclaw") is False
        assert registry.get("zeroclaw") is None

    def test_list_sorted(self, registry):
        assert registry.list() == ["picoclaw", "zeroclaw"]
        assert [m.runtime for m in registry.list_metadata()] == ["picoclaw", "zeroclaw"]

    def test_adapters_map_is_copy(self, registry):
        snapshot = registry.adapters_map()
        snapshot.clear()
        assert registry.list() == ["picoclaw", "zeroclaw"]

    def test_detect_runtime_for_capability(self, registry):
        assert registry.detect_runtime_for_capability("REASONING") == "zeroclaw"
        assert registry.detect_runtime_for_capability("embedded") == "picoclaw"
        assert registry.detect_runtime_for_capability("vision") is None

    def test_detect_first_registered_wins(self, registry):
        # Both runtimes serve chat; zeroclaw was registered first
        assert registry.detect_runtime_for_capability("chat") == "zeroclaw"

    def test_concurrent_registration(self):
        registry = AdapterRegistry()

        def worker(i):
            registry.register_dynamic(f"runtime-{i}", EchoAdapter(f"runtime-{i}"))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry.list()) == 20


class TestCatalog:
    """Test the default registry built from known runtimes."""

    def test_all_known_runtimes_registered(self):
        registry = build_default_registry()
        assert registry.list() == sorted(KNOWN_RUNTIMES)

    def test_openclaw_metadata(self):
        meta = build_default_registry().get("openclaw").metadata()
        assert meta.language == "typescript"
        assert meta.default_port == 18789
        assert meta.supports_capability("tools")

    def test_populates_given_registry(self):
        registry = AdapterRegistry()
        assert build_default_registry(registry) is registry
        assert registry.has("picoclaw")
