"""AG-UI run endpoint: one POST, one SSE stream, one run."""

from __future__ import annotations

import asyncio
import json
import time
from typing import AsyncIterator, Optional, Set

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from ...bridge.contracts import CHANNEL_ID, HostRuntime, InboundContext
from ...bridge.orchestrator import RunOrchestrator, RunRequest
from ...bridge.store import SessionStore
from ...bridge.stream import RunStream
from ...core.config import Config, ConfigManager
from ...core.id import Identifier
from ...protocol.encoder import EventEncoder
from ...util.log import Log
from ..auth import require_bearer
from ..errors import InvalidRequestError, PayloadTooLargeError
from ..messages import build_prompt, has_actionable_message
from ..schemas import RunAgentInput

log = Log.create({"service": "server.agui"})

# Keeps run tasks referenced until they finish.
_running: Set[asyncio.Task] = set()


class QueueSink:
    """Event sink feeding a streaming response body."""

    def __init__(self) -> None:
        self.queue: asyncio.Queue[Optional[str]] = asyncio.Queue()

    def write(self, chunk: str) -> None:
        self.queue.put_nowait(chunk)

    def end(self) -> None:
        self.queue.put_nowait(None)


async def read_json_body(request: Request, max_bytes: int) -> object:
    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > max_bytes:
            raise PayloadTooLargeError(max_bytes)
        chunks.append(chunk)
    try:
        return json.loads(b"".join(chunks).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidRequestError("Invalid JSON body") from e


def parse_run_input(payload: object) -> RunAgentInput:
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    try:
        return RunAgentInput.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(f"Invalid run input: {e.error_count()} validation error(s)") from e


def create_agui_router(
    runtime: HostRuntime,
    *,
    config: Optional[Config] = None,
    path: Optional[str] = None,
    store: Optional[SessionStore] = None,
) -> APIRouter:
    """Build the router serving AG-UI runs against ``runtime``.

    ``config`` is resolved once, here; ``path`` defaults to ``server.path``.
    """
    config = config or ConfigManager.get()
    path = path or config.server.path
    router = APIRouter(tags=["agui"])
    orchestrator = RunOrchestrator(runtime, store=store)

    @router.post(path)
    async def run_agent(request: Request) -> StreamingResponse:
        require_bearer(request, config)

        run_input = parse_run_input(await read_json_body(request, config.limits.max_body_bytes))
        if not has_actionable_message(run_input.messages):
            raise InvalidRequestError("At least one user or tool message is required in `messages`.")

        prompt = build_prompt(run_input.messages)
        if not prompt.body.strip():
            raise InvalidRequestError("Could not extract a prompt from `messages`.")

        thread_id = run_input.thread_id or Identifier.ascending("thread")
        run_id = run_input.run_id or Identifier.ascending("run")

        host_config = runtime.load_config()
        route = runtime.resolve_agent_route(
            config=host_config,
            channel=CHANNEL_ID,
            peer_id=f"{CHANNEL_ID}-{thread_id}",
        )
        ctx = InboundContext(
            body=prompt.body,
            raw_body=prompt.body,
            session_key=route.session_key,
            sender_id=f"{CHANNEL_ID}-{thread_id}",
            from_=f"{CHANNEL_ID}:{thread_id}",
            message_sid=run_id,
            timestamp=time.time(),
            system_prompt=prompt.system_prompt,
            previous_timestamp=runtime.read_session_updated_at(config=host_config, route=route),
        )
        await runtime.record_inbound_session(config=host_config, route=route, ctx=ctx)

        encoder = EventEncoder()
        log.debug("encoding run as sse", {"accept": request.headers.get("accept"), "run_id": run_id})
        sink = QueueSink()
        stream = RunStream(sink, encoder)
        task = asyncio.create_task(
            orchestrator.run(
                RunRequest(
                    session_key=route.session_key,
                    thread_id=thread_id,
                    run_id=run_id,
                    ctx=ctx,
                    config=host_config,
                    tools=run_input.tools,
                ),
                stream,
            )
        )
        _running.add(task)
        task.add_done_callback(_running.discard)

        log.info("run accepted", {
            "thread_id": thread_id,
            "run_id": run_id,
            "session_key": route.session_key,
            "messages": len(run_input.messages),
            "tools": len(run_input.tools),
        })

        async def body() -> AsyncIterator[str]:
            drained = False
            try:
                while True:
                    chunk = await sink.queue.get()
                    if chunk is None:
                        drained = True
                        break
                    yield chunk
            finally:
                # Closed before the end marker: the client went away.
                if not drained:
                    stream.disconnect()

        return StreamingResponse(
            body(),
            media_type=encoder.content_type(),
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",
            },
        )

    return router
