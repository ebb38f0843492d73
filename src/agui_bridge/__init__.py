"""AG-UI bridge - exposes a host agent runtime as an AG-UI SSE endpoint.

Host reply callbacks (block, final and tool results) and tool lifecycle hooks
are translated into the AG-UI event stream a web client consumes.
"""

__version__ = "0.1.0"

# Lazy imports keep ``import agui_bridge`` free of the web stack
def __getattr__(name: str):
    """Lazy import package components."""
    if name in ("GlobalPath", "Identifier"):
        from . import core
        return getattr(core, name)
    if name == "Log":
        from .util import Log
        return Log
    if name in ("AguiReplyDispatcher", "RunOrchestrator", "RunStream", "SessionStore", "session_store"):
        from . import bridge
        return getattr(bridge, name)
    if name in ("AguiBridgePlugin", "register"):
        from . import plugin
        return getattr(plugin, name)
    if name in ("EchoRuntime", "PluginHost"):
        from . import runtime
        return getattr(runtime, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    # Core
    "GlobalPath",
    "Identifier",
    "Log",
    # Bridge
    "AguiReplyDispatcher",
    "RunOrchestrator",
    "RunStream",
    "SessionStore",
    "session_store",
    # Plugin
    "AguiBridgePlugin",
    "register",
    # Runtime
    "EchoRuntime",
    "PluginHost",
]
