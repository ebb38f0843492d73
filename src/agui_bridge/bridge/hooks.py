"""Tool-call lifecycle hooks fired by the host around every tool execution.

``before_tool_call`` opens a tool call on the run's stream. Client tools are
closed immediately (the client executes them after the run ends); host tools
stay open on a per-session stack until ``tool_result_persist`` closes the most
recent one.

Both hooks are silent no-ops for sessions with no bound emitter: the host
fires them for every run, including runs that did not come through AG-UI.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from ..core.id import Identifier
from ..protocol.events import (
    ToolCallArgsEvent,
    ToolCallEndEvent,
    ToolCallResultEvent,
    ToolCallStartEvent,
)
from ..util.log import Log
from .contracts import BeforeToolCallEvent, HookContext, ToolResultPersistEvent
from .store import SessionStore, session_store

log = Log.create({"service": "bridge.hooks"})


def _coerce_before(event: BeforeToolCallEvent | Mapping[str, Any]) -> BeforeToolCallEvent:
    if isinstance(event, BeforeToolCallEvent):
        return event
    return BeforeToolCallEvent(
        tool_name=str(event.get("tool_name") or event.get("toolName") or ""),
        params=event.get("params"),
    )


def _coerce_context(ctx: HookContext | Mapping[str, Any] | None) -> HookContext:
    if isinstance(ctx, HookContext):
        return ctx
    if not ctx:
        return HookContext()
    return HookContext(
        session_key=ctx.get("session_key") or ctx.get("sessionKey"),
        agent_id=ctx.get("agent_id") or ctx.get("agentId"),
    )


def serialize_params(params: Mapping[str, Any]) -> str:
    return json.dumps(params, ensure_ascii=False, separators=(",", ":"), default=str)


def handle_before_tool_call(
    event: BeforeToolCallEvent | Mapping[str, Any],
    ctx: HookContext | Mapping[str, Any] | None,
    *,
    store: Optional[SessionStore] = None,
) -> None:
    store = store or session_store
    event = _coerce_before(event)
    session_key = _coerce_context(ctx).session_key
    if not session_key:
        log.debug("before_tool_call skipped, no session key", {"tool": event.tool_name})
        return

    emit = store.get_emitter(session_key)
    if emit is None:
        log.debug("before_tool_call skipped, no emitter", {
            "session_key": session_key,
            "tool": event.tool_name,
        })
        return

    tool_call_id = Identifier.ascending("tool")
    emit(ToolCallStartEvent(tool_call_id=tool_call_id, tool_call_name=event.tool_name))
    store.set_tool_fired_in_run(session_key)

    if event.params:
        emit(ToolCallArgsEvent(tool_call_id=tool_call_id, delta=serialize_params(event.params)))

    if store.is_client_tool(session_key, event.tool_name):
        # The client runs the tool and starts a new run with the result.
        emit(ToolCallEndEvent(tool_call_id=tool_call_id))
        store.set_client_tool_called(session_key)
        log.info("client tool call announced", {
            "session_key": session_key,
            "tool": event.tool_name,
            "tool_call_id": tool_call_id,
        })
        return

    store.push_tool_call_id(session_key, tool_call_id)
    log.info("host tool call started", {
        "session_key": session_key,
        "tool": event.tool_name,
        "tool_call_id": tool_call_id,
    })


def handle_tool_result_persist(
    event: ToolResultPersistEvent | Mapping[str, Any] | None,
    ctx: HookContext | Mapping[str, Any] | None,
    *,
    store: Optional[SessionStore] = None,
) -> None:
    store = store or session_store
    session_key = _coerce_context(ctx).session_key
    if not session_key:
        log.debug("tool_result_persist skipped, no session key")
        return

    emit = store.get_emitter(session_key)
    tool_call_id = store.pop_tool_call_id(session_key)
    message_id = store.get_message_id(session_key)
    if emit is None or tool_call_id is None or message_id is None:
        log.debug("tool_result_persist skipped", {
            "session_key": session_key,
            "emitter": emit is not None,
            "tool_call_id": tool_call_id,
            "message_id": message_id,
        })
        return

    # The result body is not re-sent; the client only needs the call closed.
    emit(ToolCallResultEvent(tool_call_id=tool_call_id, message_id=message_id, content=""))
    emit(ToolCallEndEvent(tool_call_id=tool_call_id))
    log.info("host tool call finished", {"session_key": session_key, "tool_call_id": tool_call_id})
