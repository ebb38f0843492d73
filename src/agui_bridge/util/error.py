"""Error formatting utilities."""

import json
import traceback
from typing import Any


def describe_error(error: Any) -> str:
    """Short, client-facing description of a failure.

    Used for ``RUN_ERROR.message``: never includes a traceback.
    """
    if isinstance(error, BaseException):
        text = str(error)
        return text or type(error).__name__
    return str(error)


def format_unknown_error(error: Any) -> str:
    """Format any error into a detailed string for logs.

    Exceptions render with their stack trace when one is attached.
    """
    if isinstance(error, BaseException):
        if error.__traceback__:
            return "".join(traceback.format_exception(type(error), error, error.__traceback__))
        return f"{error.__class__.__name__}: {error}"

    if isinstance(error, (dict, list)):
        try:
            return json.dumps(error, indent=2)
        except (TypeError, ValueError):
            return "Unexpected error (unserializable)"

    return str(error)
