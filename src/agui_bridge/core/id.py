"""Monotonic ID generation with prefixes.

Generates sortable, unique identifiers with type prefixes similar to Stripe IDs.
IDs embed a millisecond timestamp plus a per-millisecond counter, followed by a
random base62 suffix, so two ids generated in one process never collide.
"""

import secrets
import time
from typing import Literal

PREFIX_MAP = {
    "thread": "thread",
    "run": "run",
    "message": "msg",
    "tool": "tool",
    "request": "req",
}

IDPrefix = Literal["thread", "run", "message", "tool", "request"]

LENGTH = 26
BASE62 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

_last_timestamp = 0
_counter = 0


def _random_base62(length: int) -> str:
    return "".join(secrets.choice(BASE62) for _ in range(length))


def _create(prefix: IDPrefix, timestamp: int | None = None) -> str:
    """Create a new ascending ID like ``tool_018f2c...``."""
    global _last_timestamp, _counter

    current = timestamp if timestamp is not None else int(time.time() * 1000)
    if current != _last_timestamp:
        _last_timestamp = current
        _counter = 0
    _counter += 1

    # 48 bits: timestamp shifted left 12, plus counter
    encoded = ((current * 0x1000) + _counter) & 0xFFFFFFFFFFFF
    return f"{PREFIX_MAP[prefix]}_{encoded:012x}{_random_base62(LENGTH - 12)}"


def ascending(prefix: IDPrefix, given: str | None = None) -> str:
    """Generate an ascending ID, or validate and return ``given``."""
    if given is not None:
        if not given.startswith(PREFIX_MAP[prefix]):
            raise ValueError(f"ID {given} does not start with {PREFIX_MAP[prefix]}")
        return given
    return _create(prefix)


class Identifier:
    """Namespace class for ID generation functions."""

    ascending = staticmethod(ascending)
