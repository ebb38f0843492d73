"""In-process plugin host: collects tool factories, hooks and HTTP routers."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..bridge.contracts import HookContext, HookHandler, HostRuntime, ToolDescriptor, ToolFactory
from ..util.log import Log
from .hook_registry import HookRegistry

log = Log.create({"service": "runtime.plugin_host"})


class PluginHost:
    """Implements :class:`~agui_bridge.bridge.contracts.PluginApi`.

    ``runtime`` is optional at construction so a runtime that needs the
    host (to fire hooks and resolve tools) can be attached afterwards.
    """

    def __init__(self, runtime: Optional[HostRuntime] = None) -> None:
        self.runtime = runtime  # type: ignore[assignment]
        self.hooks = HookRegistry()
        self.routers: List[Any] = []
        self._tool_factories: List[ToolFactory] = []

    # -- PluginApi --

    def register_tool(self, factory: ToolFactory) -> None:
        self._tool_factories.append(factory)

    def on(self, hook_name: str, handler: HookHandler) -> None:
        self.hooks.on(hook_name, handler)

    def register_http_router(self, router: Any) -> None:
        self.routers.append(router)

    # -- host side --

    def resolve_tools(self, ctx: HookContext) -> Dict[str, ToolDescriptor]:
        """Ask every registered factory for this run's tools."""
        tools: Dict[str, ToolDescriptor] = {}
        for factory in self._tool_factories:
            for tool in factory(ctx) or []:
                if tool.name in tools:
                    log.warn("duplicate tool name", {"name": tool.name, "session_key": ctx.session_key})
                tools[tool.name] = tool
        return tools

    def fire(self, hook_name: str, event: Any, ctx: HookContext) -> None:
        self.hooks.fire(hook_name, event, ctx)
