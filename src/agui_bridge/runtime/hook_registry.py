"""Named lifecycle hooks with synchronous fan-out.

Example:
    hooks = HookRegistry()
    unsubscribe = hooks.on("before_tool_call", handler)
    hooks.fire("before_tool_call", BeforeToolCallEvent(tool_name="clock"), HookContext(session_key="s1"))
    unsubscribe()
"""

from __future__ import annotations

import traceback
from typing import Any, Callable, Dict, List

from ..bridge.contracts import HookContext, HookHandler
from ..util.log import Log

log = Log.create({"service": "runtime.hooks"})


class HookRegistry:
    """Handlers keyed by hook name, run in registration order.

    A failing handler is logged and does not stop the others, nor the
    tool execution that fired the hook.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[HookHandler]] = {}

    def on(self, hook_name: str, handler: HookHandler) -> Callable[[], None]:
        self._handlers.setdefault(hook_name, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(hook_name)
            if handlers and handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def fire(self, hook_name: str, event: Any, ctx: HookContext) -> None:
        for handler in list(self._handlers.get(hook_name, [])):
            try:
                handler(event, ctx)
            except Exception as e:
                log.error("hook handler failed", {
                    "hook": hook_name,
                    "session_key": ctx.session_key,
                    "error": str(e),
                    "traceback": traceback.format_exc(),
                })

    def count(self, hook_name: str) -> int:
        return len(self._handlers.get(hook_name, []))

    def clear(self) -> None:
        self._handlers.clear()
