"""Configuration management.

Loads and merges configuration from multiple sources with proper precedence.
"""

import json
import os
from contextvars import ContextVar, Token
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config_loader import deep_merge, load_json_file
from .config_schema import (
    AgentConfig,
    Config,
    GatewayAuthConfig,
    GatewayConfig,
    LimitsConfig,
    LoggingConfig,
    ServerConfig,
)
from .global_paths import CONFIG_FILENAMES, GlobalPath
from ..util.log import Log

log = Log.create({"service": "config"})

TOKEN_ENV = "AGUI_BRIDGE_GATEWAY_TOKEN"
LOG_LEVEL_ENV = "AGUI_BRIDGE_LOG_LEVEL"
CONTENT_ENV = "AGUI_BRIDGE_CONFIG_CONTENT"

__all__ = [
    "AgentConfig",
    "Config",
    "ConfigError",
    "ConfigManager",
    "GatewayAuthConfig",
    "GatewayConfig",
    "LimitsConfig",
    "LoggingConfig",
    "ServerConfig",
    "resolve_gateway_token",
]


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Config error in {path}: {message}")


def resolve_gateway_token(config: Config) -> Optional[str]:
    """Configured bearer token, falling back to the environment."""
    token = config.gateway.auth.token or os.environ.get(TOKEN_ENV)
    if isinstance(token, str) and token:
        return token
    return None


_config_var: ContextVar["ConfigManager"] = ContextVar("_config_var")


class ConfigManager:
    """Configuration management.

    Instance-based with ContextVar for scoping. Class methods delegate
    to the current instance.

    Precedence, lowest first:
    1. Global config (``<config dir>/agui-bridge.json[c]``)
    2. Project config (``agui-bridge.json[c]`` from filesystem root down to the directory)
    3. ``AGUI_BRIDGE_CONFIG_CONTENT`` (inline JSON)
    4. Single-value environment overrides (token, log level)
    """

    def __init__(self) -> None:
        self._cache: Optional[Config] = None
        self._sources: List[str] = []

    # -- ContextVar plumbing --

    @classmethod
    def current(cls) -> "ConfigManager":
        try:
            return _config_var.get()
        except LookupError:
            instance = cls()
            _config_var.set(instance)
            return instance

    @classmethod
    def provide(cls, instance: "ConfigManager") -> Token["ConfigManager"]:
        return _config_var.set(instance)

    @classmethod
    def restore(cls, token: Token["ConfigManager"]) -> None:
        _config_var.reset(token)

    # -- Public API --

    @classmethod
    def reset(cls) -> None:
        inst = cls.current()
        inst._cache = None
        inst._sources = []

    @classmethod
    def load(cls, directory: str = ".") -> Config:
        return cls.current()._load(directory)

    @classmethod
    def get(cls) -> Config:
        inst = cls.current()
        if inst._cache is None:
            return inst._load()
        return inst._cache

    @classmethod
    def set(cls, config: Config) -> None:
        """Pin an already-built config (used by the CLI and tests)."""
        cls.current()._cache = config

    @classmethod
    def sources(cls) -> List[str]:
        return cls.current()._sources.copy()

    # -- Instance methods --

    def _load(self, directory: str = ".") -> Config:
        if self._cache is not None:
            return self._cache

        result: Dict[str, Any] = {}
        sources: List[str] = []

        def apply(filepath: str | Path, label: str) -> None:
            nonlocal result
            data = load_json_file(filepath)
            if data:
                result = deep_merge(result, data)
                sources.append(str(filepath))
                log.info(f"loaded {label} config", {"path": str(filepath)})

        for filename in CONFIG_FILENAMES:
            apply(Path(GlobalPath.config()) / filename, "global")

        current = Path(directory).resolve()
        project_configs: List[Path] = []
        while True:
            for filename in CONFIG_FILENAMES:
                candidate = current / filename
                if candidate.exists():
                    project_configs.append(candidate)
            if current == current.parent:
                break
            current = current.parent

        # Root first, then more specific
        for filepath in reversed(project_configs):
            apply(filepath, "project")

        inline = os.environ.get(CONTENT_ENV)
        if inline:
            try:
                data = json.loads(inline)
            except json.JSONDecodeError:
                log.error(f"failed to parse {CONTENT_ENV}")
            else:
                if isinstance(data, dict):
                    result = deep_merge(result, data)
                    sources.append(CONTENT_ENV)

        level = os.environ.get(LOG_LEVEL_ENV)
        if level:
            result = deep_merge(result, {"logging": {"level": level}})

        try:
            config = Config.model_validate(result)
        except ValueError as e:
            raise ConfigError(sources[-1] if sources else "<defaults>", str(e)) from e

        self._cache = config
        self._sources = sources
        return config
