"""Drive one AG-UI run through the host pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..core.id import Identifier
from ..protocol.events import RunStartedEvent
from ..util.error import describe_error, format_unknown_error
from ..util.log import Log
from .contracts import ClientTool, InboundContext, ReplyHost, ReplyOptions
from .dispatcher import AguiReplyDispatcher
from .store import SessionStore, session_store
from .stream import RunStream

log = Log.create({"service": "bridge.orchestrator"})


@dataclass
class RunRequest:
    """A resolved run: where it goes and what the host should see."""
    session_key: str
    thread_id: str
    run_id: str
    ctx: InboundContext
    config: Any = None
    tools: List[ClientTool] = field(default_factory=list)


class RunOrchestrator:
    """Binds session state for a run, dispatches it, and always cleans up.

    Every run emits ``RUN_STARTED`` first and ends in exactly one of
    ``RUN_FINISHED`` or ``RUN_ERROR``, unless the client disconnected first.
    """

    def __init__(self, host: ReplyHost, *, store: Optional[SessionStore] = None) -> None:
        self.host = host
        self.store = store or session_store

    async def run(self, request: RunRequest, stream: RunStream) -> AguiReplyDispatcher:
        session_key = request.session_key
        message_id = Identifier.ascending("message")
        self.store.set_emitter(session_key, stream.emit, message_id)

        dispatcher = AguiReplyDispatcher(
            stream=stream,
            session_key=session_key,
            thread_id=request.thread_id,
            run_id=request.run_id,
            message_id=message_id,
            store=self.store,
        )

        try:
            stream.emit(RunStartedEvent(thread_id=request.thread_id, run_id=request.run_id))

            if request.tools:
                self.store.stash_tools(session_key, request.tools)
                self.store.mark_client_tool_names(session_key, [t.name for t in request.tools])

            log.info("dispatching run", {
                "session_key": session_key,
                "thread_id": request.thread_id,
                "run_id": request.run_id,
                "client_tools": len(request.tools),
            })
            await self.host.dispatch_reply(
                ctx=request.ctx,
                config=request.config,
                dispatcher=dispatcher,
                reply_options=ReplyOptions(
                    run_id=request.run_id,
                    abort_signal=stream.abort_signal,
                    on_agent_run_start=lambda: log.debug("agent run started", {"run_id": request.run_id}),
                    on_tool_result=lambda _payload: None,
                ),
            )

            # The host returned without a final reply (e.g. nothing to say).
            if not dispatcher.closed:
                log.debug("closing run without final reply", {"run_id": request.run_id})
                dispatcher.finish()
        except Exception as e:
            log.error("run failed", {
                "session_key": session_key,
                "run_id": request.run_id,
                "error": str(e),
                "traceback": format_unknown_error(e),
            })
            dispatcher.fail(describe_error(e))
        finally:
            self.store.clear_run(session_key)
            stream.end()

        return dispatcher
