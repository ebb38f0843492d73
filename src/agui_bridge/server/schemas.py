"""Pydantic schemas for the FastAPI transport layer."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..bridge.contracts import ClientTool


class ErrorInfo(BaseModel):
    code: str
    message: str
    details: dict[str, object] | list[object] | str | None = None


class ErrorResponse(BaseModel):
    error: ErrorInfo


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str | None = None


class AguiMessage(BaseModel):
    """One conversation message as sent by an AG-UI client."""

    role: str = ""
    content: Any = None
    id: str | None = None
    name: str | None = None
    tool_call_id: str | None = None
    tool_calls: list[dict[str, Any]] | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def text(self) -> str:
        """Plain string content; structured content is ignored."""
        return self.content if isinstance(self.content, str) else ""


class RunAgentInput(BaseModel):
    """Body of a run request."""

    thread_id: str | None = None
    run_id: str | None = None
    messages: list[AguiMessage] = Field(default_factory=list)
    tools: list[ClientTool] = Field(default_factory=list)
    context: list[Any] = Field(default_factory=list)
    state: Any = None
    forwarded_props: Any = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")
