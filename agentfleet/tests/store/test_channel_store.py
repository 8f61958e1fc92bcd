"""
Unit tests for ChannelStore: configs, bindings, assignments and the status matrix.
"""

import threading

import pytest

from agentfleet.core.exceptions import (
    BindingConflictError,
    BindingNotFoundError,
    UnknownChannelTypeError,
)
from agentfleet.core.models import (
    ChannelBinding,
    ChannelBindingStatus,
    ChannelConnectionStatus,
    ChannelType,
)
from agentfleet.store.channels import ChannelStore, hash_token


@pytest.fixture
def store():
    return ChannelStore()


def make_binding(instance_id, token, channel_type=ChannelType.TELEGRAM):
    return ChannelBinding(
        instance_id=instance_id,
        channel_type=channel_type,
        bot_token_hash=hash_token(token),
        status=ChannelBindingStatus.ACTIVE,
        bound_at_unix_ms=0,
    )


class TestChannelConfigs:
    """Test channel instance config CRUD."""

    def test_upsert_resolves_alias(self, store):
        config = store.upsert_config("ops-lark", "Lark", credentials={"app_id": "x"})
        assert config.channel_type == ChannelType.FEISHU
        assert store.get_config("ops-lark") is config

    def test_upsert_overwrites(self, store):
        store.upsert_config("support", "telegram", options={"a": 1})
        store.upsert_config("support", "telegram", options={"a": 2})
        assert store.get_config("support").options == {"a": 2}
        assert len(store.list_configs()) == 1

    def test_unknown_type(self, store):
        with pytest.raises(UnknownChannelTypeError, match="unknown channel type: fax"):
            store.upsert_config("legacy", "fax")

    def test_delete(self, store):
        store.upsert_config("support", "telegram")
        assert store.delete_config("support") is True
        assert store.delete_config("support") is False
        assert store.get_config("support") is None

    def test_list_sorted_and_by_type(self, store):
        store.upsert_config("b-slack", "slack")
        store.upsert_config("a-tg", "telegram")
        store.upsert_config("c-tg", "telegram")
        assert [c.instance_name for c in store.list_configs()] == ["a-tg", "b-slack", "c-tg"]
        assert [c.instance_name for c in store.list_configs_by_type("telegram")] == [
            "a-tg",
            "c-tg",
        ]

    def test_summaries(self, store):
        store.upsert_config("tg-1", "telegram")
        store.upsert_config("tg-2", "telegram")
        store.upsert_config("sl-1", "slack")
        store.set_connection_status("agent-a", "tg-1", ChannelConnectionStatus.CONNECTED)
        store.set_connection_status("agent-b", "tg-2", "proxied")
        store.set_connection_status("agent-a", "sl-1", "rate_limited")

        summaries = {s.channel_type: s for s in store.list_channel_summaries()}
        assert list(summaries) == ["slack", "telegram"]
        assert summaries["telegram"].instance_count == 2
        assert summaries["telegram"].connected == 2
        assert summaries["slack"].disconnected == 1


class TestBindings:
    """Test credential ownership rules."""

    def test_bind_hashes_token(self, store):
        binding = store.bind("zeroclaw-a", "telegram", "123:secret")
        assert binding.bot_token_hash == hash_token("123:secret")
        assert "123:secret" not in repr(store.list_bindings())

    def test_rebind_same_instance_is_idempotent(self, store):
        store.bind("zeroclaw-a", "telegram", "tok")
        store.bind("zeroclaw-a", "telegram", "tok")
        assert len(store.list_bindings()) == 1
        assert store.detect_conflicts() == []

    def test_cross_instance_conflict_names_owner(self, store):
        store.bind("zeroclaw-a", "telegram", "tok")
        with pytest.raises(BindingConflictError, match="token already bound to instance zeroclaw-a") as exc:
            store.bind("openclaw-b", "telegram", "tok")
        assert exc.value.owner_instance_id == "zeroclaw-a"
        assert len(store.list_bindings()) == 1

    def test_same_token_different_channel_type(self, store):
        store.bind("zeroclaw-a", "telegram", "tok")
        store.bind("openclaw-b", "discord", "tok")
        assert len(store.list_bindings()) == 2

    def test_rebind_after_release(self, store):
        store.bind("zeroclaw-a", "telegram", "tok")
        store.unbind_token("telegram", "tok")
        binding = store.bind("openclaw-b", "telegram", "tok")
        assert binding.instance_id == "openclaw-b"
        assert len(store.list_bindings()) == 1

    def test_unbind_by_position(self, store):
        store.bind("zeroclaw-a", "telegram", "tok")
        released = store.unbind(0)
        assert released.status == ChannelBindingStatus.RELEASED
        with pytest.raises(BindingNotFoundError):
            store.unbind(5)

    def test_unbind_token_unknown(self, store):
        with pytest.raises(BindingNotFoundError):
            store.unbind_token("telegram", "never-bound")

    def test_bypass_is_detected(self, store):
        """Duplicates loaded around bind() show up as exactly one conflict group."""
        store.restore_binding(make_binding("zeroclaw-a", "tok"))
        store.restore_binding(make_binding("openclaw-b", "tok"))
        store.restore_binding(make_binding("picoclaw-c", "other"))

        conflicts = store.detect_conflicts()
        assert len(conflicts) == 1
        assert conflicts[0].channel_type == "telegram"
        assert conflicts[0].bot_token_hash == hash_token("tok")
        assert sorted(conflicts[0].instance_ids) == ["openclaw-b", "zeroclaw-a"]

    def test_released_bindings_not_conflicts(self, store):
        store.restore_binding(make_binding("zeroclaw-a", "tok"))
        store.restore_binding(make_binding("openclaw-b", "tok"))
        store.unbind(1)
        assert store.detect_conflicts() == []

    def test_concurrent_bind_single_owner(self, store):
        errors = []

        def worker(i):
            try:
                store.bind(f"agent-{i}", "telegram", "shared")
            except BindingConflictError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(errors) == 9
        assert len([b for b in store.list_bindings() if b.is_active]) == 1


class TestAssignmentsAndMatrix:
    """Test agent channel assignments and the connectivity matrix."""

    def test_assign_idempotent(self, store):
        store.upsert_config("support", "telegram")
        store.assign_channel("zeroclaw-a", "support")
        store.assign_channel("zeroclaw-a", "support")
        assert [c.instance_name for c in store.get_agent_channels("zeroclaw-a")] == ["support"]

    def test_unassign_non_member_is_noop(self, store):
        store.unassign_channel("zeroclaw-a", "support")
        assert store.get_agent_channels("zeroclaw-a") == []

    def test_assignment_without_config_is_skipped(self, store):
        store.assign_channel("zeroclaw-a", "missing")
        assert store.get_agent_channels("zeroclaw-a") == []

    def test_connection_status_default(self, store):
        assert store.get_connection_status("a", "b") == ChannelConnectionStatus.DISCONNECTED

    def test_build_matrix(self, store):
        store.upsert_config("tg", "telegram")
        store.upsert_config("sl", "slack")
        store.set_connection_status("zeroclaw-a", "tg", "connected")

        rows = store.build_matrix([("zeroclaw-a", "zeroclaw"), ("picoclaw-b", "picoclaw")])
        assert [r.channel_instance for r in rows] == ["sl", "tg"]
        tg = rows[1]
        assert tg.channel_type == "telegram"
        assert [c.agent_id for c in tg.cells] == ["zeroclaw-a", "picoclaw-b"]
        assert tg.cells[0].status == ChannelConnectionStatus.CONNECTED
        assert tg.cells[1].status == ChannelConnectionStatus.DISCONNECTED
