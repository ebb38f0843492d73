from collections.abc import Iterator

import pytest

from agui_bridge.bridge.store import session_store
from agui_bridge.core.config import CONTENT_ENV, LOG_LEVEL_ENV, TOKEN_ENV, Config, ConfigManager


@pytest.fixture(autouse=True)
def _session_store_teardown() -> Iterator[None]:
    session_store.reset()
    yield
    session_store.reset()


@pytest.fixture(autouse=True)
def config_context(monkeypatch: pytest.MonkeyPatch) -> Iterator[ConfigManager]:
    for name in (TOKEN_ENV, LOG_LEVEL_ENV, CONTENT_ENV):
        monkeypatch.delenv(name, raising=False)
    manager = ConfigManager()
    token = ConfigManager.provide(manager)
    ConfigManager.set(Config())
    try:
        yield manager
    finally:
        ConfigManager.restore(token)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
