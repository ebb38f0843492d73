"""In-process host runtime: plugin host, hook registry and the echo agent."""

from .echo import CLOCK_TOOL, EchoRuntime, parse_directive
from .hook_registry import HookRegistry
from .plugin_host import PluginHost

__all__ = ["CLOCK_TOOL", "EchoRuntime", "HookRegistry", "PluginHost", "parse_directive"]
