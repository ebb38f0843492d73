"""Reply dispatcher that turns host replies into AG-UI text events.

One :class:`AguiReplyDispatcher` serves exactly one run. Block replies stream
as ``TEXT_MESSAGE_CONTENT`` deltas of a single assistant message; the final
reply closes the message and the run. Tool events never pass through here:
the lifecycle hooks emit them directly.

After a client tool was announced in the run, all assistant text is dropped:
the client is expected to execute the tool and start a new run.
"""

from __future__ import annotations

from typing import Optional

from ..protocol.events import (
    RunErrorEvent,
    RunFinishedEvent,
    TextMessageContentEvent,
    TextMessageEndEvent,
    TextMessageStartEvent,
)
from ..util.log import Log
from .contracts import QueuedCounts, ReplyPayload
from .store import SessionStore, session_store
from .stream import RunStream

log = Log.create({"service": "bridge.dispatcher"})


class AguiReplyDispatcher:
    """:class:`~agui_bridge.bridge.contracts.ReplyDispatcher` for one run."""

    def __init__(
        self,
        *,
        stream: RunStream,
        session_key: str,
        thread_id: str,
        run_id: str,
        message_id: str,
        store: Optional[SessionStore] = None,
    ) -> None:
        self.stream = stream
        self.session_key = session_key
        self.thread_id = thread_id
        self.run_id = run_id
        self.message_id = message_id
        self.store = store or session_store
        self.message_started = False

    @property
    def closed(self) -> bool:
        return self.stream.closed

    def _suppressed(self) -> bool:
        return self.store.was_client_tool_called(self.session_key)

    def _emit_text(self, text: str) -> None:
        if not self.message_started:
            self.message_started = True
            self.stream.emit(TextMessageStartEvent(message_id=self.message_id))
        self.stream.emit(TextMessageContentEvent(message_id=self.message_id, delta=text))

    def send_tool_result(self, payload: ReplyPayload) -> bool:
        return not self.closed

    def send_block_reply(self, payload: ReplyPayload) -> bool:
        if self.closed or self._suppressed():
            return False
        text = (payload.text or "").strip()
        if not text:
            return False
        self._emit_text(text)
        return True

    def send_final_reply(self, payload: ReplyPayload) -> bool:
        if self.closed:
            return False
        if self._suppressed():
            if payload.text:
                log.debug("final text dropped after client tool call", {"session_key": self.session_key})
            text = ""
        else:
            text = (payload.text or "").strip()
        if text:
            self._emit_text(text)
        self.finish()
        return True

    async def wait_for_idle(self) -> None:
        return None

    def get_queued_counts(self) -> QueuedCounts:
        return QueuedCounts()

    def finish(self) -> None:
        """Close the open message, emit ``RUN_FINISHED`` and end the stream."""
        if self.closed:
            return
        if self.message_started:
            self.stream.emit(TextMessageEndEvent(message_id=self.message_id))
        self.stream.emit(RunFinishedEvent(thread_id=self.thread_id, run_id=self.run_id))
        self.stream.end()
        log.info("run finished", {
            "session_key": self.session_key,
            "run_id": self.run_id,
            "message_started": self.message_started,
            "tool_fired": self.store.was_tool_fired_in_run(self.session_key),
        })

    def fail(self, message: str) -> None:
        """Emit ``RUN_ERROR`` and end the stream, unless already closed."""
        if self.closed:
            return
        self.stream.emit(RunErrorEvent(message=message))
        self.stream.end()
