"""Client-executed tools exposed to the host's agent.

AG-UI clients send tool definitions with each run. The host asks the factory
for tools once per run; the factory drains whatever the HTTP handler stashed
for the session and wraps each definition in a :class:`ToolDescriptor`.

Executing one of these descriptors does no work. The tool call events have
already been emitted by the ``before_tool_call`` hook, the run ends, and the
client answers with a new run carrying the real tool output.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from ..util.log import Log
from .contracts import ClientTool, HookContext, ToolDescriptor, ToolExecutionResult
from .store import SessionStore, session_store

log = Log.create({"service": "bridge.client_tools"})

EMPTY_SCHEMA: Dict[str, Any] = {"type": "object", "properties": {}}


def _describe(tool: ClientTool) -> ToolDescriptor:
    name = tool.name
    parameters = tool.parameters if tool.parameters else dict(EMPTY_SCHEMA)

    async def execute(tool_call_id: str, args: Any) -> ToolExecutionResult:
        log.info("client tool executed", {"name": name, "tool_call_id": tool_call_id})
        return ToolExecutionResult(
            content=[{"type": "text", "text": json.dumps(args, ensure_ascii=False)}],
            details={"client_tool": True, "name": name, "args": args},
        )

    return ToolDescriptor(
        name=name,
        label=name,
        description=tool.description,
        parameters=parameters,
        execute=execute,
    )


def client_tool_factory(
    ctx: HookContext,
    *,
    store: Optional[SessionStore] = None,
) -> Optional[List[ToolDescriptor]]:
    """Build tool descriptors for the session's stashed client tools.

    Returns ``None`` when there is no session key or nothing was stashed.
    """
    store = store or session_store
    session_key = ctx.session_key
    if not session_key:
        log.debug("no session key, no client tools")
        return None

    tools = store.pop_tools(session_key)
    if not tools:
        return None

    log.info("providing client tools", {
        "session_key": session_key,
        "names": [t.name for t in tools],
    })
    return [_describe(tool) for tool in tools]
