"""Wire encoding of AG-UI events as server-sent events."""

from __future__ import annotations

import json
from typing import Any, Mapping

from .events import AguiEvent

SSE_CONTENT_TYPE = "text/event-stream"


class EventEncoder:
    """Render events as ``data: <json>\\n\\n`` SSE frames.

    SSE is the only encoding produced, whatever the client accepts.
    """

    def content_type(self) -> str:
        return SSE_CONTENT_TYPE

    def encode(self, event: AguiEvent | Mapping[str, Any]) -> str:
        payload = event.to_wire() if isinstance(event, AguiEvent) else dict(event)
        return f"data: {json.dumps(payload, ensure_ascii=False, separators=(',', ':'))}\n\n"


def decode_sse(text: str) -> list[dict[str, Any]]:
    """Parse ``data:`` lines back into event dictionaries, skipping anything else."""
    events: list[dict[str, Any]] = []
    for line in text.splitlines():
        if not line.startswith("data:"):
            continue
        payload = line.removeprefix("data:").strip()
        if payload:
            events.append(json.loads(payload))
    return events
