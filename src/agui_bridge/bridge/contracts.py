"""Interfaces between the bridge and the host message-routing pipeline.

The host owns routing, agent execution and tool execution. It talks to the
bridge through three seams:

- a reply dispatcher (:class:`ReplyDispatcher`) the bridge hands to
  :meth:`ReplyHost.dispatch_reply` for one run;
- two lifecycle hooks (:data:`BEFORE_TOOL_CALL`, :data:`TOOL_RESULT_PERSIST`)
  the host fires around every tool execution, addressed by session key;
- a tool factory the host calls once per run to collect client tools.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from ..protocol.events import AguiEvent

BEFORE_TOOL_CALL = "before_tool_call"
TOOL_RESULT_PERSIST = "tool_result_persist"

CHANNEL_ID = "agui"

EventEmitter = Callable[[AguiEvent], None]


class ClientTool(BaseModel):
    """Tool definition supplied by the remote client in a run request."""

    name: str = Field(min_length=1)
    description: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="allow")


@dataclass
class HookContext:
    """Context the host passes to lifecycle hooks and the tool factory."""
    session_key: Optional[str] = None
    agent_id: Optional[str] = None


@dataclass
class BeforeToolCallEvent:
    tool_name: str
    params: Optional[Dict[str, Any]] = None


@dataclass
class ToolResultPersistEvent:
    """Fired after the host persisted a tool result.

    Correlation does not use any of these fields; they are informational.
    """
    tool_name: Optional[str] = None
    tool_call_id: Optional[str] = None
    result: Any = None


@dataclass
class ReplyPayload:
    text: Optional[str] = None
    media_urls: List[str] = field(default_factory=list)


@dataclass
class QueuedCounts:
    tool: int = 0
    block: int = 0
    final: int = 0


@dataclass
class ReplyOptions:
    """Per-run options forwarded to the host's dispatch entry point."""
    run_id: str
    abort_signal: asyncio.Event
    disable_block_streaming: bool = False
    on_agent_run_start: Optional[Callable[[], None]] = None
    on_tool_result: Optional[Callable[[ReplyPayload], None]] = None


@dataclass
class AgentRoute:
    session_key: str
    agent_id: str
    account_id: str = "default"


@dataclass
class InboundContext:
    """Normalized inbound message handed to the host pipeline."""
    body: str
    raw_body: str
    session_key: str
    sender_id: str
    message_sid: str
    timestamp: float
    from_: str = ""
    to: str = CHANNEL_ID
    chat_type: str = "direct"
    provider: str = CHANNEL_ID
    conversation_label: str = "AG-UI"
    sender_name: str = "AG-UI Client"
    system_prompt: Optional[str] = None
    previous_timestamp: Optional[float] = None
    was_mentioned: bool = True
    command_authorized: bool = True


@dataclass
class ToolExecutionResult:
    content: List[Dict[str, Any]]
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ToolDescriptor:
    """Callable tool handed to the host's tool registry."""
    name: str
    label: str
    description: Optional[str]
    parameters: Dict[str, Any]
    execute: Callable[[str, Any], Awaitable[ToolExecutionResult]]


ToolFactory = Callable[[HookContext], Optional[List[ToolDescriptor]]]
HookHandler = Callable[[Any, HookContext], None]


@runtime_checkable
class ReplyDispatcher(Protocol):
    """Callback surface the host pipeline drives during one run.

    ``send_*`` return ``True`` when the payload was accepted for delivery.
    """

    def send_tool_result(self, payload: ReplyPayload) -> bool: ...

    def send_block_reply(self, payload: ReplyPayload) -> bool: ...

    def send_final_reply(self, payload: ReplyPayload) -> bool: ...

    async def wait_for_idle(self) -> None: ...

    def get_queued_counts(self) -> QueuedCounts: ...


class ReplyHost(Protocol):
    """The host pipeline's dispatch entry point."""

    async def dispatch_reply(
        self,
        *,
        ctx: InboundContext,
        config: Any,
        dispatcher: ReplyDispatcher,
        reply_options: ReplyOptions,
    ) -> Any: ...


class HostRuntime(ReplyHost, Protocol):
    """Everything the HTTP transport needs from the host, beyond dispatch."""

    def load_config(self) -> Any: ...

    def resolve_agent_route(self, *, config: Any, channel: str, peer_id: str) -> AgentRoute: ...

    def read_session_updated_at(self, *, config: Any, route: AgentRoute) -> Optional[float]: ...

    async def record_inbound_session(self, *, config: Any, route: AgentRoute, ctx: InboundContext) -> None: ...


class PluginApi(Protocol):
    """Registration surface a host offers to plugins."""

    runtime: HostRuntime

    def register_tool(self, factory: ToolFactory) -> None: ...

    def on(self, hook_name: str, handler: HookHandler) -> None: ...

    def register_http_router(self, router: Any) -> None: ...
