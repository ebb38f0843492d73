"""FastAPI application factory."""

from __future__ import annotations

import secrets
import time
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..runtime.plugin_host import PluginHost
from ..util.log import Log
from .errors import register_error_handlers
from .routes import system
from .schemas import ErrorResponse

access = Log.create({"service": "server.access"})


def create_app(
    host: PluginHost,
    *,
    access_log: bool = True,
    cors: Optional[List[str]] = None,
) -> FastAPI:
    """Create a FastAPI application.

    Routers registered by plugins on ``host`` are mounted after the system
    routes, so the plugins must be registered before this is called.
    """
    app = FastAPI(
        title="AG-UI Bridge",
        version=__version__,
        openapi_version="3.1.0",
        responses={
            400: {"model": ErrorResponse},
            401: {"model": ErrorResponse},
            413: {"model": ErrorResponse},
            422: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    app.state.plugin_host = host

    @app.middleware("http")
    async def _access_log(request: Request, call_next):
        rid = request.headers.get("x-request-id") or secrets.token_hex(8)
        request.state.request_id = rid
        begin = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            if access_log:
                access.error(
                    "request failed",
                    {
                        "request_id": rid,
                        "method": request.method,
                        "path": request.url.path,
                        "client_ip": request.client.host if request.client else None,
                        "duration_ms": int((time.perf_counter() - begin) * 1000),
                        "error": str(e),
                    },
                )
            raise
        response.headers["X-Request-ID"] = rid
        if not access_log:
            return response
        access.info(
            "request",
            {
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "client_ip": request.client.host if request.client else None,
                "duration_ms": int((time.perf_counter() - begin) * 1000),
            },
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(system.router)
    for router in host.routers:
        app.include_router(router)
    return app
