"""Utility modules."""

from .log import Log
from .error import describe_error, format_unknown_error

__all__ = ["Log", "describe_error", "format_unknown_error"]
