from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from agui_bridge.core.config import (
    CONTENT_ENV,
    LOG_LEVEL_ENV,
    TOKEN_ENV,
    Config,
    ConfigError,
    ConfigManager,
    resolve_gateway_token,
)
from agui_bridge.core.config_loader import deep_merge, load_json_file, substitute_env_vars
from agui_bridge.core.config_schema import DEFAULT_MAX_BODY_BYTES, DEFAULT_PATH, DEFAULT_PORT
from agui_bridge.core.global_paths import GlobalPath


@pytest.fixture
def dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> tuple[Path, Path]:
    global_dir = tmp_path / "global"
    project_dir = tmp_path / "project"
    global_dir.mkdir()
    project_dir.mkdir()
    monkeypatch.setattr(GlobalPath, "config", classmethod(lambda cls: str(global_dir)))
    ConfigManager.reset()
    return global_dir, project_dir


def test_config_defaults() -> None:
    config = Config.model_validate({})

    assert config.gateway.auth.token is None
    assert config.server.hostname == "127.0.0.1"
    assert config.server.port == DEFAULT_PORT
    assert config.server.path == DEFAULT_PATH
    assert config.limits.max_body_bytes == DEFAULT_MAX_BODY_BYTES == 1024 * 1024
    assert config.agent.default == "main"
    assert config.logging is None


def test_config_accepts_camel_case_keys_and_forbids_unknown_fields() -> None:
    config = Config.model_validate({
        "$schema": "https://example.invalid/schema.json",
        "limits": {"maxBodyBytes": 10},
        "logging": {"accessLog": False, "devFile": True},
    })
    assert config.limits.max_body_bytes == 10
    assert config.logging is not None and config.logging.access_log is False

    with pytest.raises(ValidationError):
        Config.model_validate({"unknown": 1})
    with pytest.raises(ValidationError):
        Config.model_validate({"logging": {"colour": True}})
    with pytest.raises(ValidationError):
        Config.model_validate({"limits": {"maxBodyBytes": 0}})


def test_deep_merge_and_env_substitution(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MY_TOKEN", "abc")

    assert deep_merge({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}, "d": 4}) == {"a": {"b": 1, "c": 3}, "d": 4}
    assert substitute_env_vars('{"t": "{env:MY_TOKEN}", "u": "{env:MISSING_VAR}"}') == '{"t": "abc", "u": ""}'


def test_load_json_file_reads_jsonc_and_ignores_bad_files(tmp_path: Path) -> None:
    good = tmp_path / "good.jsonc"
    good.write_text('{\n  // comment\n  "server": {"port": 5000}\n}\n', encoding="utf-8")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    array = tmp_path / "array.json"
    array.write_text("[1, 2]", encoding="utf-8")

    assert load_json_file(good) == {"server": {"port": 5000}}
    assert load_json_file(bad) == {}
    assert load_json_file(array) == {}
    assert load_json_file(tmp_path / "missing.json") == {}


def test_project_config_overrides_global(dirs: tuple[Path, Path]) -> None:
    global_dir, project_dir = dirs
    (global_dir / "agui-bridge.json").write_text(
        json.dumps({"server": {"port": 5000, "hostname": "0.0.0.0"}, "gateway": {"auth": {"token": "g"}}}),
        encoding="utf-8",
    )
    (project_dir / "agui-bridge.jsonc").write_text('{\n  // local\n  "server": {"port": 6000}\n}\n', encoding="utf-8")

    config = ConfigManager.load(str(project_dir))

    assert config.server.port == 6000
    assert config.server.hostname == "0.0.0.0"
    assert config.gateway.auth.token == "g"
    assert ConfigManager.sources() == [
        str(global_dir / "agui-bridge.json"),
        str(project_dir / "agui-bridge.jsonc"),
    ]
    assert ConfigManager.get() is config


def test_environment_overrides(dirs: tuple[Path, Path], monkeypatch: pytest.MonkeyPatch) -> None:
    _, project_dir = dirs
    monkeypatch.setenv(CONTENT_ENV, json.dumps({"agent": {"default": "helper"}}))
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")

    config = ConfigManager.load(str(project_dir))

    assert config.agent.default == "helper"
    assert config.logging is not None and config.logging.level == "debug"
    assert CONTENT_ENV in ConfigManager.sources()


def test_invalid_merged_config_raises_config_error(dirs: tuple[Path, Path]) -> None:
    _, project_dir = dirs
    (project_dir / "agui-bridge.json").write_text('{"server": {"port": "not a port"}}', encoding="utf-8")

    with pytest.raises(ConfigError):
        ConfigManager.load(str(project_dir))


def test_gateway_token_falls_back_to_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_gateway_token(Config()) is None

    monkeypatch.setenv(TOKEN_ENV, "env-token")
    assert resolve_gateway_token(Config()) == "env-token"
    assert resolve_gateway_token(Config.model_validate({"gateway": {"auth": {"token": "cfg"}}})) == "cfg"


def test_config_manager_scopes_are_isolated() -> None:
    outer = ConfigManager.get()
    token = ConfigManager.provide(ConfigManager())
    try:
        ConfigManager.set(Config.model_validate({"server": {"port": 1234}}))
        assert ConfigManager.get().server.port == 1234
    finally:
        ConfigManager.restore(token)

    assert ConfigManager.get() is outer
