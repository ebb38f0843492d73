"""HTTP transport for the AG-UI bridge.

Endpoints:
    GET /health - Health check
    POST /v1/agui - AG-UI run, answered with an SSE event stream
"""

from .app import create_app
from .server import Server, ServerInfo

__all__ = [
    "Server",
    "ServerInfo",
    "create_app",
]
