from __future__ import annotations

from agui_bridge.bridge.contracts import ClientTool
from agui_bridge.bridge.store import SessionStore


def test_unknown_session_reads_return_defaults() -> None:
    store = SessionStore()

    assert store.pop_tools("nope") == []
    assert store.get_emitter("nope") is None
    assert store.get_message_id("nope") is None
    assert store.pop_tool_call_id("nope") is None
    assert store.pending_tool_call_ids("nope") == []
    assert store.is_client_tool("nope", "x") is False
    assert store.client_tool_names("nope") == set()
    assert store.was_tool_fired_in_run("nope") is False
    assert store.was_client_tool_called("nope") is False


def test_stashed_tools_are_drained_once() -> None:
    store = SessionStore()
    store.stash_tools("s1", [ClientTool(name="get_weather"), ClientTool(name="search")])

    assert [t.name for t in store.pop_tools("s1")] == ["get_weather", "search"]
    assert store.pop_tools("s1") == []


def test_stash_replaces_previous_tools() -> None:
    store = SessionStore()
    store.stash_tools("s1", [ClientTool(name="a")])
    store.stash_tools("s1", [ClientTool(name="b")])

    assert [t.name for t in store.pop_tools("s1")] == ["b"]


def test_emitter_and_message_id_bind_together() -> None:
    store = SessionStore()
    seen: list[object] = []
    store.set_emitter("s1", seen.append, "msg_1")

    emit = store.get_emitter("s1")
    assert emit is not None
    emit("event")
    assert seen == ["event"]
    assert store.get_message_id("s1") == "msg_1"

    store.clear_emitter("s1")
    store.clear_emitter("s1")
    assert store.get_emitter("s1") is None
    assert store.get_message_id("s1") is None


def test_pending_tool_calls_pop_last_in_first_out() -> None:
    store = SessionStore()
    store.push_tool_call_id("s1", "tool_a")
    store.push_tool_call_id("s1", "tool_b")

    assert store.pending_tool_call_ids("s1") == ["tool_a", "tool_b"]
    assert store.pop_tool_call_id("s1") == "tool_b"
    assert store.pop_tool_call_id("s1") == "tool_a"
    assert store.pop_tool_call_id("s1") is None


def test_client_tool_names_replace_and_clear() -> None:
    store = SessionStore()
    store.mark_client_tool_names("s1", ["a", "b"])
    store.mark_client_tool_names("s1", ["c"])

    assert store.is_client_tool("s1", "c") is True
    assert store.is_client_tool("s1", "a") is False
    assert store.is_client_tool("s2", "c") is False

    store.clear_client_tool_names("s1")
    assert store.client_tool_names("s1") == set()


def test_flags_are_idempotent() -> None:
    store = SessionStore()
    store.set_tool_fired_in_run("s1")
    store.set_tool_fired_in_run("s1")
    store.set_client_tool_called("s1")

    assert store.was_tool_fired_in_run("s1") is True
    assert store.was_client_tool_called("s1") is True

    store.clear_tool_fired_in_run("s1")
    store.clear_client_tool_called("s1")
    store.clear_client_tool_called("s1")
    assert store.was_tool_fired_in_run("s1") is False
    assert store.was_client_tool_called("s1") is False


def test_clear_run_keeps_stash_and_drops_pending_calls() -> None:
    store = SessionStore()
    store.stash_tools("s1", [ClientTool(name="a")])
    store.set_emitter("s1", lambda event: None, "msg_1")
    store.push_tool_call_id("s1", "tool_a")
    store.mark_client_tool_names("s1", ["a"])
    store.set_tool_fired_in_run("s1")
    store.set_client_tool_called("s1")

    store.clear_run("s1")

    assert store.get_emitter("s1") is None
    assert store.get_message_id("s1") is None
    assert store.client_tool_names("s1") == set()
    assert store.was_tool_fired_in_run("s1") is False
    assert store.was_client_tool_called("s1") is False
    assert store.pending_tool_call_ids("s1") == []
    assert store.pop_tool_call_id("s1") is None
    assert [t.name for t in store.pop_tools("s1")] == ["a"]


def test_sessions_are_isolated_and_reset_forgets_all() -> None:
    store = SessionStore()
    store.set_client_tool_called("s1")
    store.push_tool_call_id("s2", "tool_x")

    assert store.was_client_tool_called("s2") is False
    assert store.pop_tool_call_id("s1") is None

    store.reset()
    assert store.was_client_tool_called("s1") is False
    assert store.pending_tool_call_ids("s2") == []
