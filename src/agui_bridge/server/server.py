"""HTTP server for the AG-UI bridge.

Example:
    from agui_bridge.server import Server

    info = await Server.start(app, port=4097)
    print(f"Server running at {info.url}")

    await Server.stop()
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI

from ..core.config_schema import DEFAULT_PORT
from ..util.log import Log

log = Log.create({"service": "server"})


@dataclass
class ServerInfo:
    """Information about a running server."""
    host: str
    port: int
    path: str = ""

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}{self.path}"


class Server:
    """Runs a FastAPI app under uvicorn in the current event loop."""

    _app: Optional[FastAPI] = None
    _server: Optional[Any] = None
    _task: Optional[asyncio.Task] = None
    _info: Optional[ServerInfo] = None

    @classmethod
    async def start(
        cls,
        app: FastAPI,
        host: str = "127.0.0.1",
        port: int = DEFAULT_PORT,
        path: str = "",
    ) -> ServerInfo:
        cls._app = app
        config = uvicorn.Config(
            app,
            host=host,
            port=port,
            log_level="warning",
        )
        cls._server = uvicorn.Server(config)
        cls._info = ServerInfo(host=host, port=port, path=path)

        log.info("starting server", {"host": host, "port": port})
        cls._task = asyncio.create_task(cls._server.serve())

        while not cls._server.started:
            if cls._task.done():
                # Bind failures end serve() before it reports started.
                task = cls._task
                cls._server = cls._task = cls._app = cls._info = None
                task.result()
                raise RuntimeError(f"server failed to start on {host}:{port}")
            await asyncio.sleep(0.1)

        log.info("server started", {"url": cls._info.url})
        return cls._info

    @classmethod
    async def stop(cls) -> None:
        if cls._server:
            log.info("stopping server")
            cls._server.should_exit = True
            if cls._task is not None:
                await cls._task
            cls._server = None
            cls._task = None
            cls._app = None
            cls._info = None
            log.info("server stopped")

    @classmethod
    def info(cls) -> Optional[ServerInfo]:
        return cls._info
