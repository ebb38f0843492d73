"""Configuration schema: Pydantic models for agui-bridge config files."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PATH = "/v1/agui"
DEFAULT_PORT = 4097
DEFAULT_MAX_BODY_BYTES = 1024 * 1024


class GatewayAuthConfig(BaseModel):
    """Bearer token accepted by the AG-UI endpoint."""
    token: Optional[str] = None


class GatewayConfig(BaseModel):
    auth: GatewayAuthConfig = Field(default_factory=GatewayAuthConfig)


class ServerConfig(BaseModel):
    """HTTP server configuration."""
    hostname: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    path: str = DEFAULT_PATH
    cors: Optional[List[str]] = None


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Optional[str] = None
    format: Optional[Literal["kv", "json", "pretty"]] = None
    console: Optional[bool] = None
    file: Optional[bool] = None
    access_log: Optional[bool] = Field(None, alias="accessLog")
    dev_file: Optional[bool] = Field(None, alias="devFile")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class LimitsConfig(BaseModel):
    max_body_bytes: int = Field(DEFAULT_MAX_BODY_BYTES, alias="maxBodyBytes", gt=0)

    model_config = ConfigDict(populate_by_name=True)


class AgentConfig(BaseModel):
    """Agent selection passed through to the host runtime."""
    default: str = "main"


class Config(BaseModel):
    """Main configuration schema."""
    schema_: Optional[str] = Field(None, alias="$schema")
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: Optional[LoggingConfig] = None
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)

    model_config = ConfigDict(extra="forbid", populate_by_name=True)
