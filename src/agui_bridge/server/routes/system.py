"""System transport routes."""

from __future__ import annotations

from fastapi import APIRouter

from ... import __version__
from ..schemas import HealthResponse

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)
