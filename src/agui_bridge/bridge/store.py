"""Per-session run state shared between the HTTP handler and the tool hooks.

The hooks are fired by the host pipeline with nothing but a session key, so
everything they need (the run's event emitter, its message id, the set of
client tool names, pending host tool calls) lives here, keyed by that key.

Every read returns a default for an unknown key and every write may be
repeated. Nothing here is persisted; the orchestrator clears a session's
entries when its run ends.

Two concurrent runs on the same session key share these entries: the second
``set_emitter`` replaces the first run's emitter and message id.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set

from ..util.log import Log
from .contracts import ClientTool, EventEmitter

log = Log.create({"service": "bridge.store"})


class SessionStore:
    """Process-wide registry of run state, addressed by session key."""

    def __init__(self) -> None:
        self._tools: Dict[str, List[ClientTool]] = {}
        self._emitters: Dict[str, EventEmitter] = {}
        self._message_ids: Dict[str, str] = {}
        self._pending: Dict[str, List[str]] = {}
        self._client_tool_names: Dict[str, Set[str]] = {}
        self._tool_fired: Set[str] = set()
        self._client_tool_called: Set[str] = set()

    # -- client tool definitions (drained by the tool factory) --

    def stash_tools(self, session_key: str, tools: List[ClientTool]) -> None:
        self._tools[session_key] = list(tools)
        log.debug("stashed client tools", {
            "session_key": session_key,
            "count": len(tools),
            "names": [t.name for t in tools],
        })

    def pop_tools(self, session_key: str) -> List[ClientTool]:
        """Remove and return the stashed tools; empty on a second call."""
        tools = self._tools.pop(session_key, [])
        log.debug("drained client tools", {"session_key": session_key, "count": len(tools)})
        return tools

    # -- event emitter bound for the current run --

    def set_emitter(self, session_key: str, emitter: EventEmitter, message_id: str) -> None:
        if session_key in self._emitters:
            log.warn("replacing bound emitter", {"session_key": session_key})
        self._emitters[session_key] = emitter
        self._message_ids[session_key] = message_id

    def get_emitter(self, session_key: str) -> Optional[EventEmitter]:
        return self._emitters.get(session_key)

    def get_message_id(self, session_key: str) -> Optional[str]:
        return self._message_ids.get(session_key)

    def clear_emitter(self, session_key: str) -> None:
        self._emitters.pop(session_key, None)
        self._message_ids.pop(session_key, None)

    # -- pending host tool calls --
    # before_tool_call pushes, tool_result_persist pops. Last in, first out:
    # host tools within one run are assumed not to overlap.

    def push_tool_call_id(self, session_key: str, tool_call_id: str) -> None:
        stack = self._pending.setdefault(session_key, [])
        stack.append(tool_call_id)
        log.debug("pushed tool call", {
            "session_key": session_key,
            "tool_call_id": tool_call_id,
            "depth": len(stack),
        })

    def pop_tool_call_id(self, session_key: str) -> Optional[str]:
        stack = self._pending.get(session_key)
        if not stack:
            log.debug("no pending tool call", {"session_key": session_key})
            return None
        tool_call_id = stack.pop()
        if not stack:
            del self._pending[session_key]
        log.debug("popped tool call", {
            "session_key": session_key,
            "tool_call_id": tool_call_id,
            "depth": len(stack),
        })
        return tool_call_id

    def pending_tool_call_ids(self, session_key: str) -> List[str]:
        return list(self._pending.get(session_key, []))

    # -- client tool names --

    def mark_client_tool_names(self, session_key: str, names: List[str]) -> None:
        self._client_tool_names[session_key] = set(names)
        log.debug("marked client tools", {"session_key": session_key, "names": sorted(set(names))})

    def is_client_tool(self, session_key: str, tool_name: str) -> bool:
        return tool_name in self._client_tool_names.get(session_key, ())

    def client_tool_names(self, session_key: str) -> Set[str]:
        return set(self._client_tool_names.get(session_key, ()))

    def clear_client_tool_names(self, session_key: str) -> None:
        self._client_tool_names.pop(session_key, None)

    # -- run flags --

    def set_tool_fired_in_run(self, session_key: str) -> None:
        self._tool_fired.add(session_key)

    def was_tool_fired_in_run(self, session_key: str) -> bool:
        return session_key in self._tool_fired

    def clear_tool_fired_in_run(self, session_key: str) -> None:
        self._tool_fired.discard(session_key)

    def set_client_tool_called(self, session_key: str) -> None:
        log.debug("client tool called", {"session_key": session_key})
        self._client_tool_called.add(session_key)

    def was_client_tool_called(self, session_key: str) -> bool:
        return session_key in self._client_tool_called

    def clear_client_tool_called(self, session_key: str) -> None:
        self._client_tool_called.discard(session_key)

    # -- teardown --

    def clear_run(self, session_key: str) -> None:
        """Drop the run-scoped entries of one session.

        Stashed tools are left alone; the tool factory drains them. Pending
        tool call ids go with the run so a later run never closes a call it
        did not open.
        """
        self.clear_emitter(session_key)
        self._pending.pop(session_key, None)
        self.clear_client_tool_called(session_key)
        self.clear_client_tool_names(session_key)
        self.clear_tool_fired_in_run(session_key)
        log.debug("cleared run state", {"session_key": session_key})

    def reset(self) -> None:
        """Forget every session."""
        self._tools.clear()
        self._emitters.clear()
        self._message_ids.clear()
        self._pending.clear()
        self._client_tool_names.clear()
        self._tool_fired.clear()
        self._client_tool_called.clear()


session_store = SessionStore()
