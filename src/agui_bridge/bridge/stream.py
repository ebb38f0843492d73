"""Output stream of one run.

Owns the run's ``closed`` flag. Once closed, by a terminal event, a failed
write or a client disconnect, every further emit is a silent no-op.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from ..protocol.encoder import EventEncoder
from ..protocol.events import AguiEvent
from ..util.log import Log

log = Log.create({"service": "bridge.stream"})


class EventSink(Protocol):
    """Transport the encoded frames are written to."""

    def write(self, chunk: str) -> None: ...

    def end(self) -> None: ...


class RunStream:
    """Encodes and writes events for a single run."""

    def __init__(self, sink: EventSink, encoder: Optional[EventEncoder] = None) -> None:
        self.sink = sink
        self.encoder = encoder or EventEncoder()
        self.abort_signal = asyncio.Event()
        self.emitted = 0
        self._closed = False
        self._ended = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def disconnected(self) -> bool:
        return self.abort_signal.is_set()

    def emit(self, event: AguiEvent) -> None:
        if self._closed:
            return
        try:
            self.sink.write(self.encoder.encode(event))
        except Exception as e:
            self._closed = True
            log.debug("stream write failed, closing", {"event": event.type, "error": str(e)})
            return
        self.emitted += 1

    def end(self) -> None:
        """Close the stream and end the transport exactly once."""
        self._closed = True
        if self._ended:
            return
        self._ended = True
        try:
            self.sink.end()
        except Exception as e:
            log.debug("stream end failed", {"error": str(e)})

    def disconnect(self) -> None:
        """Client went away: stop writing and signal the host to abort."""
        if not self._closed:
            log.info("client disconnected", {"emitted": self.emitted})
        self._closed = True
        self.abort_signal.set()
