"""Plugin entry point: wires the AG-UI channel into a host."""

from __future__ import annotations

from typing import Optional

from .bridge.client_tools import client_tool_factory
from .bridge.contracts import BEFORE_TOOL_CALL, TOOL_RESULT_PERSIST, PluginApi
from .bridge.hooks import handle_before_tool_call, handle_tool_result_persist
from .bridge.store import SessionStore, session_store
from .core.config import Config, ConfigManager
from .server.routes.agui import create_agui_router
from .util.log import Log

log = Log.create({"service": "plugin"})

PLUGIN_ID = "agui"
PLUGIN_NAME = "AG-UI"


class AguiBridgePlugin:
    """Registers the client tool factory, both tool hooks and the HTTP route."""

    id = PLUGIN_ID
    name = PLUGIN_NAME
    description = "AG-UI protocol endpoint for web clients"

    def __init__(self, config: Optional[Config] = None, store: Optional[SessionStore] = None) -> None:
        self.config = config
        self.store = store or session_store

    def register(self, api: PluginApi) -> None:
        store = self.store
        config = self.config or ConfigManager.get()
        path = config.server.path

        api.register_tool(lambda ctx: client_tool_factory(ctx, store=store))
        api.on(BEFORE_TOOL_CALL, lambda event, ctx: handle_before_tool_call(event, ctx, store=store))
        api.on(TOOL_RESULT_PERSIST, lambda event, ctx: handle_tool_result_persist(event, ctx, store=store))
        api.register_http_router(create_agui_router(api.runtime, config=config, store=store))
        log.info("plugin registered", {"path": path})


def register(api: PluginApi) -> AguiBridgePlugin:
    plugin = AguiBridgePlugin()
    plugin.register(api)
    return plugin
