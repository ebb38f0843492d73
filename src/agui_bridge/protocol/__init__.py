"""AG-UI event vocabulary and wire encoding."""

from .encoder import SSE_CONTENT_TYPE, EventEncoder, decode_sse
from .events import (
    AguiEvent,
    AnyEvent,
    EventType,
    RunErrorEvent,
    RunFinishedEvent,
    RunStartedEvent,
    TextMessageContentEvent,
    TextMessageEndEvent,
    TextMessageStartEvent,
    ToolCallArgsEvent,
    ToolCallEndEvent,
    ToolCallResultEvent,
    ToolCallStartEvent,
)

__all__ = [
    "SSE_CONTENT_TYPE",
    "AguiEvent",
    "AnyEvent",
    "EventEncoder",
    "EventType",
    "RunErrorEvent",
    "RunFinishedEvent",
    "RunStartedEvent",
    "TextMessageContentEvent",
    "TextMessageEndEvent",
    "TextMessageStartEvent",
    "ToolCallArgsEvent",
    "ToolCallEndEvent",
    "ToolCallResultEvent",
    "ToolCallStartEvent",
    "decode_sse",
]
