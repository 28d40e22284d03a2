"""
Internal debug service.

A second FastAPI application that simulates an admin endpoint meant
for host-local use only. It performs no authentication: the only thing
keeping it private is that its listener is bound to the loopback
interface. `build_internal_server` enforces that bind and refuses any
other host.
"""

from __future__ import annotations

import ipaddress

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from .config import INTERNAL_HOST, INTERNAL_PORT, Settings, process_uptime
from .models.schemas import InternalInfoResponse


INTERNAL_SERVICE_NAME = "internal-debug"


def create_internal_app(settings: Settings) -> FastAPI:
    """Create the internal app with the flag captured from ``settings``."""
    flag_line = f"admin-secret: {settings.flag}\n"

    app = FastAPI(title="Internal debug service", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/internal/flag", response_class=PlainTextResponse)
    async def internal_flag() -> str:
        return flag_line

    @app.get("/internal/info", response_model=InternalInfoResponse)
    async def internal_info() -> InternalInfoResponse:
        return InternalInfoResponse(name=INTERNAL_SERVICE_NAME, uptime=process_uptime())

    return app


def is_loopback_host(host: str) -> bool:
    """Return True only for loopback IP literals.

    Hostnames are rejected too, since what they resolve to is outside
    our control at bind time.
    """
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def build_internal_server(
    app: FastAPI,
    host: str = INTERNAL_HOST,
    port: int = INTERNAL_PORT,
    log_level: str = "info",
) -> uvicorn.Server:
    """Return a uvicorn server for the internal app, bound to loopback.

    Raises:
        ValueError: If ``host`` is not a loopback address, including the
            wildcard addresses ``0.0.0.0`` and ``::``.
    """
    if not is_loopback_host(host):
        raise ValueError(f"internal service must bind to a loopback address, got {host!r}")
    config = uvicorn.Config(app, host=host, port=port, log_level=log_level)
    return uvicorn.Server(config)
