from __future__ import annotations

from agui_bridge.bridge.contracts import BeforeToolCallEvent, HookContext, ToolResultPersistEvent
from agui_bridge.bridge.hooks import handle_before_tool_call, handle_tool_result_persist
from agui_bridge.bridge.store import SessionStore
from agui_bridge.protocol.events import AguiEvent

KEY = "agent:main:agui:agui-t1"


def _bound_store(client_tools: list[str] | None = None) -> tuple[SessionStore, list[AguiEvent]]:
    store = SessionStore()
    events: list[AguiEvent] = []
    store.set_emitter(KEY, events.append, "msg_1")
    if client_tools:
        store.mark_client_tool_names(KEY, client_tools)
    return store, events


def _wire(events: list[AguiEvent]) -> list[dict]:
    return [e.to_wire() for e in events]


def test_client_tool_call_is_opened_and_closed_immediately() -> None:
    store, events = _bound_store(["get_weather"])

    handle_before_tool_call(
        BeforeToolCallEvent(tool_name="get_weather", params={"city": "Tokyo"}),
        HookContext(session_key=KEY),
        store=store,
    )

    wire = _wire(events)
    assert [e["type"] for e in wire] == ["TOOL_CALL_START", "TOOL_CALL_ARGS", "TOOL_CALL_END"]
    call_id = wire[0]["toolCallId"]
    assert call_id.startswith("tool_")
    assert wire[0]["toolCallName"] == "get_weather"
    assert wire[1] == {"type": "TOOL_CALL_ARGS", "toolCallId": call_id, "delta": '{"city":"Tokyo"}'}
    assert wire[2]["toolCallId"] == call_id
    assert store.was_client_tool_called(KEY) is True
    assert store.was_tool_fired_in_run(KEY) is True
    assert store.pending_tool_call_ids(KEY) == []


def test_host_tool_call_stays_open_until_result_persisted() -> None:
    store, events = _bound_store()
    ctx = HookContext(session_key=KEY)

    handle_before_tool_call(BeforeToolCallEvent(tool_name="search", params={"q": "x"}), ctx, store=store)

    assert [e.type for e in events] == ["TOOL_CALL_START", "TOOL_CALL_ARGS"]
    call_id = events[0].tool_call_id
    assert store.pending_tool_call_ids(KEY) == [call_id]
    assert store.was_client_tool_called(KEY) is False

    handle_tool_result_persist(ToolResultPersistEvent(tool_name="search"), ctx, store=store)

    wire = _wire(events)
    assert wire[2] == {
        "type": "TOOL_CALL_RESULT",
        "toolCallId": call_id,
        "messageId": "msg_1",
        "content": "",
        "role": "tool",
    }
    assert wire[3] == {"type": "TOOL_CALL_END", "toolCallId": call_id}
    assert store.pending_tool_call_ids(KEY) == []


def test_empty_params_emit_no_args_event() -> None:
    store, events = _bound_store()
    ctx = HookContext(session_key=KEY)

    handle_before_tool_call(BeforeToolCallEvent(tool_name="clock"), ctx, store=store)
    handle_before_tool_call(BeforeToolCallEvent(tool_name="clock", params={}), ctx, store=store)

    assert [e.type for e in events] == ["TOOL_CALL_START", "TOOL_CALL_START"]


def test_nested_host_tools_close_most_recent_first() -> None:
    store, events = _bound_store()
    ctx = HookContext(session_key=KEY)

    handle_before_tool_call(BeforeToolCallEvent(tool_name="outer"), ctx, store=store)
    handle_before_tool_call(BeforeToolCallEvent(tool_name="inner"), ctx, store=store)
    outer_id, inner_id = events[0].tool_call_id, events[1].tool_call_id

    handle_tool_result_persist(ToolResultPersistEvent(), ctx, store=store)
    handle_tool_result_persist(ToolResultPersistEvent(), ctx, store=store)

    closed = [e.tool_call_id for e in events if e.type == "TOOL_CALL_END"]
    assert closed == [inner_id, outer_id]


def test_hooks_are_noops_without_session_key_or_emitter() -> None:
    store = SessionStore()
    store.mark_client_tool_names(KEY, ["get_weather"])

    handle_before_tool_call(BeforeToolCallEvent(tool_name="get_weather"), HookContext(), store=store)
    handle_before_tool_call(BeforeToolCallEvent(tool_name="get_weather"), HookContext(session_key=KEY), store=store)
    handle_tool_result_persist(ToolResultPersistEvent(), HookContext(session_key=KEY), store=store)
    handle_tool_result_persist(None, None, store=store)

    assert store.was_tool_fired_in_run(KEY) is False
    assert store.was_client_tool_called(KEY) is False
    assert store.pending_tool_call_ids(KEY) == []


def test_result_without_pending_call_emits_nothing() -> None:
    store, events = _bound_store()

    handle_tool_result_persist(ToolResultPersistEvent(tool_name="x"), HookContext(session_key=KEY), store=store)

    assert events == []


def test_result_after_emitter_cleared_still_pops_pending_call() -> None:
    store, events = _bound_store()
    ctx = HookContext(session_key=KEY)
    handle_before_tool_call(BeforeToolCallEvent(tool_name="search"), ctx, store=store)
    store.clear_emitter(KEY)

    handle_tool_result_persist(ToolResultPersistEvent(), ctx, store=store)

    assert [e.type for e in events] == ["TOOL_CALL_START"]
    assert store.pending_tool_call_ids(KEY) == []


def test_hooks_accept_plain_mappings() -> None:
    store, events = _bound_store(["get_weather"])

    handle_before_tool_call(
        {"toolName": "get_weather", "params": {"city": "Tokyo"}},
        {"sessionKey": KEY},
        store=store,
    )

    assert [e.type for e in events] == ["TOOL_CALL_START", "TOOL_CALL_ARGS", "TOOL_CALL_END"]


def test_tool_call_ids_are_unique() -> None:
    store, events = _bound_store()
    ctx = HookContext(session_key=KEY)
    for _ in range(50):
        handle_before_tool_call(BeforeToolCallEvent(tool_name="t"), ctx, store=store)

    assert len({e.tool_call_id for e in events}) == 50


def test_sequential_host_tools_pair_results_with_their_start() -> None:
    store, events = _bound_store()
    ctx = HookContext(session_key=KEY)

    for name in ("first", "second"):
        handle_before_tool_call(BeforeToolCallEvent(tool_name=name, params={"n": name}), ctx, store=store)
        handle_tool_result_persist(ToolResultPersistEvent(tool_name=name), ctx, store=store)

    starts = [e.tool_call_id for e in events if e.type == "TOOL_CALL_START"]
    results = [e.tool_call_id for e in events if e.type == "TOOL_CALL_RESULT"]
    ends = [e.tool_call_id for e in events if e.type == "TOOL_CALL_END"]
    assert starts[0] != starts[1]
    assert results == ends == starts
