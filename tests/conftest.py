# tests/conftest.py

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from todoapi import htmx, main, mux
from todoapi.config import Settings
from todoapi.service import TodoService

from .fakes import FakeClock


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc), step=timedelta(seconds=1))


@pytest.fixture()
def service(clock: FakeClock) -> TodoService:
    return TodoService(clock=clock)


@pytest.fixture()
def static_dir(tmp_path: Path) -> Path:
    web = tmp_path / "web"
    web.mkdir()
    (web / "index.html").write_text("<html><body>todo index</body></html>", encoding="utf-8")
    (web / "styles.css").write_text("body { color: black; }", encoding="utf-8")
    (web / "script.js").write_text("console.log('todo');", encoding="utf-8")
    return web


@pytest.fixture()
def settings(static_dir: Path) -> Settings:
    return Settings(static_dir=static_dir)


@pytest.fixture(params=["fastapi", "starlette"])
def json_client(request, service: TodoService, settings: Settings) -> TestClient:
    """Client for either JSON front end; both must honour the same contract."""
    factory = main.create_app if request.param == "fastapi" else mux.create_app
    with TestClient(factory(service=service, settings=settings)) as client:
        yield client


@pytest.fixture()
def htmx_client(service: TodoService, settings: Settings) -> TestClient:
    with TestClient(htmx.create_app(service=service, settings=settings)) as client:
        yield client
