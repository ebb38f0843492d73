from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from starlette.testclient import TestClient

from agui_bridge.cli.cmd import serve as serve_module
from agui_bridge.core.config import Config, ConfigManager
from agui_bridge.core.global_paths import GlobalPath
from agui_bridge.server.server import ServerInfo
from agui_bridge.util.log import Log


def test_overrides_apply_on_top_of_config() -> None:
    base = Config.model_validate({"server": {"port": 5000, "path": "/agui"}, "gateway": {"auth": {"token": "a"}}})

    config = serve_module.with_overrides(base, host="0.0.0.0", token="b")

    assert config.server.hostname == "0.0.0.0"
    assert config.server.port == 5000
    assert config.server.path == "/agui"
    assert config.gateway.auth.token == "b"
    assert base.gateway.auth.token == "a"


def test_build_app_serves_echo_runtime_on_configured_path() -> None:
    config = Config.model_validate({"server": {"path": "/custom"}, "gateway": {"auth": {"token": "t"}}})
    app = serve_module.build_app(config, access_log=False)

    with TestClient(app) as client:
        with client.stream(
            "POST",
            "/custom",
            json={"threadId": "t1", "messages": [{"role": "user", "content": "ping"}]},
            headers={"Authorization": "Bearer t"},
        ) as response:
            assert response.status_code == 200
            body = "".join(response.iter_text())

    assert '"delta":"ping"' in body
    assert '"type":"RUN_FINISHED"' in body


@pytest.mark.anyio
async def test_serve_app_starts_and_stops_server(monkeypatch: pytest.MonkeyPatch) -> None:
    events: list[str] = []

    async def fake_start(cls, app: Any, host: str = "127.0.0.1", port: int = 0, path: str = "") -> ServerInfo:
        events.append("start")
        return ServerInfo(host=host, port=port, path=path)

    async def fake_stop(cls) -> None:
        events.append("stop")

    async def wait() -> None:
        events.append("wait")

    monkeypatch.setattr("agui_bridge.cli.cmd.serve.Server.start", classmethod(fake_start))
    monkeypatch.setattr("agui_bridge.cli.cmd.serve.Server.stop", classmethod(fake_stop))

    await serve_module.serve_app(app=object(), host="127.0.0.1", port=4301, path="/v1/agui", wait=wait)  # type: ignore[arg-type]

    assert events == ["start", "wait", "stop"]


def test_serve_command_wires_config_logging_and_server(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    seen: dict[str, Any] = {}

    async def fake_serve_app(*, app: Any, host: str, port: int, path: str) -> None:
        seen.update(app=app, host=host, port=port, path=path)

    monkeypatch.setattr(GlobalPath, "log", classmethod(lambda cls: str(tmp_path)))
    monkeypatch.setattr(serve_module, "serve_app", fake_serve_app)

    try:
        serve_module.serve_command(host=None, port=4302, token="secret", log_level="warn", print_logs=False)
    finally:
        Log.configure(console=False, file=False)

    assert seen["host"] == "127.0.0.1"
    assert seen["port"] == 4302
    assert seen["path"] == "/v1/agui"
    assert ConfigManager.get().gateway.auth.token == "secret"
