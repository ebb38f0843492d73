"""HTTP routes."""

from . import system
from .agui import create_agui_router

__all__ = ["create_agui_router", "system"]
