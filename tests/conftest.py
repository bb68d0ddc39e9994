"""Shared pytest fixtures for integration and unit tests."""

from __future__ import annotations

from typing import Generator, TypedDict

import pytest

from ready_server.bootstrap.config import BIND_ENV_VAR
from ready_server.server import ReadyServer
from tests.utils.http import reserve_port, wait_for_port


class ServerInfo(TypedDict):
    """Metadata describing a running server fixture instance."""

    base_url: str
    host: str
    port: int
    server: ReadyServer


@pytest.fixture(autouse=True)
def clear_bind_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a bind override from the outer environment out of tests."""

    monkeypatch.delenv(BIND_ENV_VAR, raising=False)


@pytest.fixture(name="ready_server")
def _ready_server() -> Generator[ServerInfo, None, None]:
    """Run a readiness server in-process on a free loopback-reachable port."""

    host = "127.0.0.1"
    port = reserve_port(host)
    server = ReadyServer(port)
    server.start()
    try:
        wait_for_port(host, port)
        yield {
            "base_url": f"http://{host}:{port}",
            "host": host,
            "port": port,
            "server": server,
        }
    finally:
        server.stop()


@pytest.fixture()
def base_url(ready_server: ServerInfo) -> str:
    """Expose the running server base URL to integration tests."""

    return ready_server["base_url"]
