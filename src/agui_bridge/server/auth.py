"""Bearer token authentication for the AG-UI endpoint."""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Request

from ..core.config import Config, resolve_gateway_token
from .errors import UnauthorizedError


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    raw = (authorization or "").strip()
    if not raw.lower().startswith("bearer "):
        return None
    return raw[7:].strip() or None


def is_authorized(authorization: Optional[str], config: Config) -> bool:
    token = bearer_token(authorization)
    expected = resolve_gateway_token(config)
    if not token or not expected:
        return False
    return secrets.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


def require_bearer(request: Request, config: Config) -> None:
    if not is_authorized(request.headers.get("authorization"), config):
        raise UnauthorizedError()
