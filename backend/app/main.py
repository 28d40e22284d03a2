"""
Entry point for the public-facing FastAPI app of the SSRF challenge.

This module constructs the application that players talk to. It
registers the ``/api`` routes and serves the static frontend from
``backend/web`` at ``/``. The fetch route applies a naive forbidlist
before fetching a URL server-side; alternate IPv4 spellings get
through it and can reach the internal debug service (see
``internal.py``) that listens on loopback only.

The public app never sees the flag. Only the internal service is
given it, through its own factory.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api import fetch as fetch_routes
from .api import health as health_routes


WEB_DIR = Path(__file__).resolve().parents[1] / "web"


def create_app(web_dir: Path | None = None) -> FastAPI:
    """Create and configure the public FastAPI application instance.

    CORS is left open to any origin, as the challenge frontend may be
    served from anywhere.

    Returns:
        FastAPI: Configured application instance.
    """
    app = FastAPI(title="DEVS legacy (SSRF demo)")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(fetch_routes.router)
    app.include_router(health_routes.router)

    # Mounted last so the API routes take precedence over "/".
    static_dir = web_dir or WEB_DIR
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="web")

    return app


# Create a default application instance for uvicorn to discover.
app = create_app()
