"""Serve command - run the AG-UI endpoint in front of the echo runtime."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Optional

from fastapi import FastAPI
from rich.console import Console

from ...core.config import Config, ConfigManager, GatewayAuthConfig, resolve_gateway_token
from ...plugin import AguiBridgePlugin
from ...runtime.echo import EchoRuntime
from ...runtime.logging import bootstrap_logging
from ...runtime.plugin_host import PluginHost
from ...server.app import create_app
from ...server.server import Server
from ...util.log import Log

log = Log.create({"service": "cli.serve"})
console = Console()


async def _wait_forever() -> None:
    await asyncio.Future()


def with_overrides(
    config: Config,
    *,
    host: Optional[str] = None,
    port: Optional[int] = None,
    token: Optional[str] = None,
) -> Config:
    """Apply command-line flags on top of the loaded config."""
    server = config.server.model_copy(update={
        key: value
        for key, value in (("hostname", host), ("port", port))
        if value is not None
    })
    gateway = config.gateway
    if token:
        gateway = gateway.model_copy(update={"auth": GatewayAuthConfig(token=token)})
    return config.model_copy(update={"server": server, "gateway": gateway})


def build_app(config: Config, *, access_log: bool = True, chunk_delay: float = 0.0) -> FastAPI:
    """Echo runtime + bridge plugin + FastAPI app, wired together."""
    host = PluginHost()
    EchoRuntime(host, agent_id=config.agent.default, chunk_delay=chunk_delay)
    AguiBridgePlugin(config).register(host)
    return create_app(host, access_log=access_log, cors=config.server.cors)


async def serve_app(
    *,
    app: FastAPI,
    host: str,
    port: int,
    path: str,
    wait: Callable[[], Awaitable[None]] | None = None,
) -> None:
    info = await Server.start(app, host=host, port=port, path=path)
    console.print(f"[green]AG-UI bridge[/green] listening at {info.url}")

    block = wait or _wait_forever
    try:
        await block()
    finally:
        await Server.stop()
        log.info("bridge stopped", {"host": host, "port": port})


def serve_command(
    *,
    host: Optional[str],
    port: Optional[int],
    token: Optional[str],
    log_level: Optional[str],
    print_logs: bool,
) -> None:
    config = with_overrides(ConfigManager.get(), host=host, port=port, token=token)
    ConfigManager.set(config)
    settings = bootstrap_logging(
        mode="serve",
        level=log_level,
        console=True if print_logs else None,
    )

    if resolve_gateway_token(config) is None:
        console.print("[yellow]No gateway token configured; every request will be rejected.[/yellow]")
        log.warn("no gateway token configured")

    app = build_app(config, access_log=settings.access_log)
    try:
        asyncio.run(
            serve_app(
                app=app,
                host=config.server.hostname,
                port=config.server.port,
                path=config.server.path,
            )
        )
    except KeyboardInterrupt:
        console.print("\nStopping AG-UI bridge...")
