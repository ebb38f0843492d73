"""Translation between host reply callbacks and the AG-UI event stream."""

from .client_tools import client_tool_factory
from .contracts import (
    BEFORE_TOOL_CALL,
    CHANNEL_ID,
    TOOL_RESULT_PERSIST,
    AgentRoute,
    BeforeToolCallEvent,
    ClientTool,
    HookContext,
    HostRuntime,
    InboundContext,
    PluginApi,
    QueuedCounts,
    ReplyDispatcher,
    ReplyHost,
    ReplyOptions,
    ReplyPayload,
    ToolDescriptor,
    ToolExecutionResult,
    ToolResultPersistEvent,
)
from .dispatcher import AguiReplyDispatcher
from .hooks import handle_before_tool_call, handle_tool_result_persist
from .orchestrator import RunOrchestrator, RunRequest
from .store import SessionStore, session_store
from .stream import EventSink, RunStream

__all__ = [
    "BEFORE_TOOL_CALL",
    "CHANNEL_ID",
    "TOOL_RESULT_PERSIST",
    "AgentRoute",
    "AguiReplyDispatcher",
    "BeforeToolCallEvent",
    "ClientTool",
    "EventSink",
    "HookContext",
    "HostRuntime",
    "InboundContext",
    "PluginApi",
    "QueuedCounts",
    "ReplyDispatcher",
    "ReplyHost",
    "ReplyOptions",
    "ReplyPayload",
    "RunOrchestrator",
    "RunRequest",
    "RunStream",
    "SessionStore",
    "ToolDescriptor",
    "ToolExecutionResult",
    "ToolResultPersistEvent",
    "client_tool_factory",
    "handle_before_tool_call",
    "handle_tool_result_persist",
    "session_store",
]
