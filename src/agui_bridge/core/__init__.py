"""Core infrastructure modules."""

from .global_paths import GlobalPath
from .id import Identifier

__all__ = ["GlobalPath", "Identifier"]

# Config is imported from its module to avoid a cycle with util.log:
# from agui_bridge.core.config import ConfigManager
