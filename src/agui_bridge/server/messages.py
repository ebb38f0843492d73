"""Flatten AG-UI conversation messages into a single prompt body."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .schemas import AguiMessage

ROLE_LABELS = {
    "user": "User",
    "assistant": "Assistant",
    "tool": "Tool",
}

# A run needs something new to respond to: a user turn or a client tool result.
ACTIONABLE_ROLES = frozenset({"user", "tool"})


@dataclass
class Prompt:
    body: str
    system_prompt: Optional[str] = None


def has_actionable_message(messages: Sequence[AguiMessage]) -> bool:
    return any(m.role in ACTIONABLE_ROLES for m in messages)


def build_prompt(messages: Sequence[AguiMessage]) -> Prompt:
    """Render the conversation as ``Role: text`` lines.

    System messages become the system prompt. A conversation made of a
    single user message is passed through verbatim.
    """
    system_parts: list[str] = []
    lines: list[str] = []
    last_user = ""

    for msg in messages:
        role = (msg.role or "").strip()
        content = msg.text().strip()
        if not role or not content:
            continue
        if role == "system":
            system_parts.append(content)
            continue
        label = ROLE_LABELS.get(role)
        if label is None:
            continue
        if role == "user":
            last_user = content
        lines.append(f"{label}: {content}")

    user_count = sum(1 for m in messages if m.role == "user")
    body = last_user if user_count == 1 and len(lines) == 1 else "\n".join(lines)
    return Prompt(
        body=body,
        system_prompt="\n\n".join(system_parts) if system_parts else None,
    )
