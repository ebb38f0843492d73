"""Shared test helpers."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

from agui_bridge.bridge.contracts import (
    AgentRoute,
    HookContext,
    InboundContext,
    ReplyDispatcher,
    ReplyOptions,
)
from agui_bridge.bridge.stream import RunStream
from agui_bridge.core.config import Config
from agui_bridge.protocol.encoder import decode_sse

TOKEN = "test-token"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


def config_with_token(token: str = TOKEN, **overrides: Any) -> Config:
    return Config.model_validate({"gateway": {"auth": {"token": token}}, **overrides})


class RecordingSink:
    """In-memory event sink; ``fail_after`` makes the n+1-th write raise."""

    def __init__(self, fail_after: Optional[int] = None) -> None:
        self.chunks: list[str] = []
        self.ended = 0
        self.fail_after = fail_after

    def write(self, chunk: str) -> None:
        if self.fail_after is not None and len(self.chunks) >= self.fail_after:
            raise BrokenPipeError("client gone")
        self.chunks.append(chunk)

    def end(self) -> None:
        self.ended += 1

    def events(self) -> list[dict[str, Any]]:
        return decode_sse("".join(self.chunks))

    def types(self) -> list[str]:
        return [e["type"] for e in self.events()]


def recording_stream(fail_after: Optional[int] = None) -> tuple[RunStream, RecordingSink]:
    sink = RecordingSink(fail_after=fail_after)
    return RunStream(sink), sink


def inbound(session_key: str = "agent:main:agui:agui-t1", body: str = "hello") -> InboundContext:
    return InboundContext(
        body=body,
        raw_body=body,
        session_key=session_key,
        sender_id="agui-t1",
        message_sid="run_1",
        timestamp=0.0,
    )


DispatchScript = Callable[[InboundContext, ReplyDispatcher, ReplyOptions], Awaitable[None]]


class FakeHost:
    """Host runtime whose dispatch behaviour is an async script."""

    def __init__(self, script: Optional[DispatchScript] = None) -> None:
        self.script = script
        self.dispatched: list[InboundContext] = []
        self.recorded: list[InboundContext] = []
        self.options: list[ReplyOptions] = []

    def load_config(self) -> dict[str, Any]:
        return {}

    def resolve_agent_route(self, *, config: Any, channel: str, peer_id: str) -> AgentRoute:
        return AgentRoute(session_key=f"agent:main:{channel}:{peer_id}", agent_id="main")

    def read_session_updated_at(self, *, config: Any, route: AgentRoute) -> Optional[float]:
        return None

    async def record_inbound_session(self, *, config: Any, route: AgentRoute, ctx: InboundContext) -> None:
        self.recorded.append(ctx)

    async def dispatch_reply(
        self,
        *,
        ctx: InboundContext,
        config: Any,
        dispatcher: ReplyDispatcher,
        reply_options: ReplyOptions,
    ) -> None:
        self.dispatched.append(ctx)
        self.options.append(reply_options)
        if self.script is not None:
            await self.script(ctx, dispatcher, reply_options)


def hook_ctx(session_key: str = "agent:main:agui:agui-t1") -> HookContext:
    return HookContext(session_key=session_key, agent_id="main")
