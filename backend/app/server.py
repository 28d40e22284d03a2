"""Run the public app and the loopback-only internal service together.

Usage:
    python -m backend.app.server
"""

from __future__ import annotations

import asyncio
import logging

import uvicorn

from .config import INTERNAL_HOST, INTERNAL_PORT, Settings, load_settings
from .internal import build_internal_server, create_internal_app
from .main import create_app


logger = logging.getLogger("ssrf_lab")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def run(settings: Settings) -> None:
    internal_server = build_internal_server(
        create_internal_app(settings),
        log_level=settings.log_level,
    )
    public_server = uvicorn.Server(
        uvicorn.Config(
            create_app(),
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level,
        )
    )
    logger.info("Internal debug service listening on %s:%s", INTERNAL_HOST, INTERNAL_PORT)
    logger.info("Public app listening on %s:%s", settings.host, settings.port)
    logger.info("Endpoints: /api/fetch?url=<url>    (naive protection)")
    await asyncio.gather(internal_server.serve(), public_server.serve())


def main() -> int:
    settings = load_settings()
    configure_logging(settings.log_level)
    asyncio.run(run(settings))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
