"""Echo host runtime for local development and integration tests.

Plays the part of a real agent pipeline just enough to exercise the bridge:
the prompt is echoed back line by line as block replies, and a trailing
``/tool <name> [json]`` line makes the "agent" call that tool first, firing
the lifecycle hooks around it exactly as a host would.
"""

from __future__ import annotations

import asyncio
import json
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..bridge.contracts import (
    BEFORE_TOOL_CALL,
    TOOL_RESULT_PERSIST,
    AgentRoute,
    BeforeToolCallEvent,
    HookContext,
    InboundContext,
    ReplyDispatcher,
    ReplyOptions,
    ReplyPayload,
    ToolDescriptor,
    ToolExecutionResult,
    ToolResultPersistEvent,
)
from ..core.id import Identifier
from ..util.log import Log
from .plugin_host import PluginHost

log = Log.create({"service": "runtime.echo"})

DIRECTIVE = re.compile(r"^(?:User:\s*)?/tool\s+(?P<name>[\w.-]+)(?:\s+(?P<args>\{.*\}))?\s*$")


@dataclass
class ToolDirective:
    name: str
    params: Optional[Dict[str, Any]]


def parse_directive(body: str) -> tuple[Optional[ToolDirective], str]:
    """Split a trailing ``/tool`` line off the prompt body.

    Returns the directive (or ``None``) and the remaining text.
    """
    lines = body.strip().splitlines()
    if not lines:
        return None, ""
    match = DIRECTIVE.match(lines[-1].strip())
    if match is None:
        return None, body.strip()

    params: Optional[Dict[str, Any]] = None
    if match.group("args"):
        try:
            loaded = json.loads(match.group("args"))
        except json.JSONDecodeError:
            loaded = None
        if isinstance(loaded, dict):
            params = loaded
    return ToolDirective(name=match.group("name"), params=params), "\n".join(lines[:-1]).strip()


async def _clock(tool_call_id: str, args: Any) -> ToolExecutionResult:
    now = datetime.now(timezone.utc).isoformat(timespec="seconds")
    return ToolExecutionResult(content=[{"type": "text", "text": now}], details={"utc": now})


CLOCK_TOOL = ToolDescriptor(
    name="clock",
    label="clock",
    description="Current UTC time",
    parameters={"type": "object", "properties": {}},
    execute=_clock,
)


class EchoRuntime:
    """:class:`~agui_bridge.bridge.contracts.HostRuntime` that echoes prompts."""

    def __init__(
        self,
        host: PluginHost,
        *,
        agent_id: str = "main",
        chunk_delay: float = 0.0,
    ) -> None:
        self.host = host
        self.agent_id = agent_id
        self.chunk_delay = chunk_delay
        self.builtin_tools: Dict[str, ToolDescriptor] = {CLOCK_TOOL.name: CLOCK_TOOL}
        self._updated_at: Dict[str, float] = {}
        host.runtime = self

    def load_config(self) -> Dict[str, Any]:
        return {"agent": self.agent_id}

    def resolve_agent_route(self, *, config: Any, channel: str, peer_id: str) -> AgentRoute:
        agent_id = (config or {}).get("agent") or self.agent_id
        return AgentRoute(session_key=f"agent:{agent_id}:{channel}:{peer_id}", agent_id=agent_id)

    def read_session_updated_at(self, *, config: Any, route: AgentRoute) -> Optional[float]:
        return self._updated_at.get(route.session_key)

    async def record_inbound_session(self, *, config: Any, route: AgentRoute, ctx: InboundContext) -> None:
        self._updated_at[route.session_key] = ctx.timestamp

    async def dispatch_reply(
        self,
        *,
        ctx: InboundContext,
        config: Any,
        dispatcher: ReplyDispatcher,
        reply_options: ReplyOptions,
    ) -> Dict[str, Any]:
        if reply_options.on_agent_run_start:
            reply_options.on_agent_run_start()

        hook_ctx = HookContext(session_key=ctx.session_key, agent_id=self.agent_id)
        tools = {**self.builtin_tools, **self.host.resolve_tools(hook_ctx)}
        directive, text = parse_directive(ctx.body)
        counts = {"tool": 0, "block": 0, "final": 0}

        if directive is not None:
            tool = tools.get(directive.name)
            if tool is None:
                log.warn("unknown tool requested", {"name": directive.name, "session_key": ctx.session_key})
                text = "\n".join(part for part in (text, f"Unknown tool: {directive.name}") if part)
            else:
                await self._call_tool(tool, directive, hook_ctx, dispatcher, reply_options)
                counts["tool"] += 1

        for line in text.splitlines():
            if reply_options.abort_signal.is_set():
                log.info("run aborted", {"session_key": ctx.session_key})
                return {"queued_final": False, "counts": counts}
            if dispatcher.send_block_reply(ReplyPayload(text=line)):
                counts["block"] += 1
            if self.chunk_delay:
                await asyncio.sleep(self.chunk_delay)

        if reply_options.abort_signal.is_set():
            return {"queued_final": False, "counts": counts}
        dispatcher.send_final_reply(ReplyPayload(text=""))
        counts["final"] += 1
        self._updated_at[ctx.session_key] = time.time()
        return {"queued_final": True, "counts": counts}

    async def _call_tool(
        self,
        tool: ToolDescriptor,
        directive: ToolDirective,
        hook_ctx: HookContext,
        dispatcher: ReplyDispatcher,
        reply_options: ReplyOptions,
    ) -> None:
        call_id = Identifier.ascending("tool")
        self.host.fire(BEFORE_TOOL_CALL, BeforeToolCallEvent(tool_name=tool.name, params=directive.params), hook_ctx)
        result = await tool.execute(call_id, directive.params or {})
        self.host.fire(
            TOOL_RESULT_PERSIST,
            ToolResultPersistEvent(tool_name=tool.name, tool_call_id=call_id, result=result),
            hook_ctx,
        )
        summary = " ".join(str(part.get("text", "")) for part in result.content)
        payload = ReplyPayload(text=summary)
        dispatcher.send_tool_result(payload)
        if reply_options.on_tool_result:
            reply_options.on_tool_result(payload)
