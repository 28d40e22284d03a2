from __future__ import annotations

import asyncio
import socket
import threading
import time
from contextlib import contextmanager
from typing import Iterator

import pytest
import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, RedirectResponse
from fastapi.testclient import TestClient

from backend.app.config import Settings
from backend.app.internal import build_internal_server, create_internal_app
from backend.app.main import create_app


TEST_FLAG = "FLAG{test_secret}"


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@contextmanager
def serve_in_thread(server: uvicorn.Server, timeout: float = 10.0) -> Iterator[uvicorn.Server]:
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()
    deadline = time.monotonic() + timeout
    while not server.started:
        if not thread.is_alive() or time.monotonic() > deadline:
            raise RuntimeError("test server failed to start")
        time.sleep(0.02)
    try:
        yield server
    finally:
        server.should_exit = True
        thread.join(timeout=timeout)


def _upstream_app(internal_port: int) -> FastAPI:
    app = FastAPI()

    @app.get("/text", response_class=PlainTextResponse)
    async def text(size: int = 10) -> str:
        return "a" * size

    @app.get("/missing")
    async def missing() -> PlainTextResponse:
        return PlainTextResponse("nope", status_code=404)

    @app.get("/redirect")
    async def redirect() -> RedirectResponse:
        return RedirectResponse("/text?size=5", status_code=302)

    @app.get("/bounce")
    async def bounce() -> RedirectResponse:
        return RedirectResponse(f"http://127.0.0.1:{internal_port}/internal/flag", status_code=302)

    @app.get("/loop")
    async def loop() -> RedirectResponse:
        return RedirectResponse("/loop", status_code=302)

    @app.get("/toftp")
    async def toftp() -> RedirectResponse:
        return RedirectResponse("ftp://example.com/", status_code=302)

    @app.get("/slow", response_class=PlainTextResponse)
    async def slow() -> str:
        await asyncio.sleep(1.5)
        return "late"

    return app


@pytest.fixture
def settings() -> Settings:
    return Settings(flag=TEST_FLAG)


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def internal_client(settings: Settings) -> TestClient:
    return TestClient(create_internal_app(settings))


@pytest.fixture(scope="session")
def internal_port() -> Iterator[int]:
    """A real internal service listening on a free loopback port."""
    port = free_port()
    server = build_internal_server(
        create_internal_app(Settings(flag=TEST_FLAG)),
        port=port,
        log_level="warning",
    )
    with serve_in_thread(server):
        yield port


@pytest.fixture(scope="session")
def upstream_port(internal_port: int) -> Iterator[int]:
    port = free_port()
    server = uvicorn.Server(
        uvicorn.Config(_upstream_app(internal_port), host="127.0.0.1", port=port, log_level="warning")
    )
    with serve_in_thread(server):
        yield port


@pytest.fixture(scope="session")
def gateway_port(internal_port: int) -> Iterator[int]:
    """The public app on a real uvicorn server, for concurrency checks."""
    port = free_port()
    server = uvicorn.Server(
        uvicorn.Config(create_app(), host="127.0.0.1", port=port, log_level="warning")
    )
    with serve_in_thread(server):
        yield port
