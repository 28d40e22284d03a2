"""
Process-wide configuration for the SSRF lab.

Settings are read from the environment (optionally seeded from
``backend/.env``) exactly once at process start and handed to the
application factories. The flag lives here and nowhere else; the
internal service receives it through its factory argument.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_FLAG = "FLAG{ssrf_decimal_wrap}"
DEFAULT_PORT = 3000

# The internal listener is deliberately not configurable.
INTERNAL_HOST = "127.0.0.1"
INTERNAL_PORT = 8000

PROCESS_STARTED_AT = time.monotonic()


def _get_env_int(name: str, default: int) -> int:
    value = os.getenv(name, str(default))
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    flag: str = DEFAULT_FLAG
    port: int = DEFAULT_PORT
    host: str = "0.0.0.0"
    log_level: str = "info"


def load_settings(env_file: Path | None = None) -> Settings:
    """Build the immutable settings object from the environment.

    ``FLAG`` and ``PORT`` are the only variables the challenge itself
    needs. An empty ``FLAG`` falls back to the placeholder, as does a
    ``PORT`` that is not an integer.
    """
    env_path = env_file or Path(__file__).resolve().parents[1] / ".env"
    load_dotenv(env_path)
    return Settings(
        flag=os.getenv("FLAG") or DEFAULT_FLAG,
        port=_get_env_int("PORT", DEFAULT_PORT),
        host=os.getenv("HOST") or "0.0.0.0",
        log_level=(os.getenv("LOG_LEVEL") or "info").strip().lower(),
    )


def process_uptime() -> float:
    return time.monotonic() - PROCESS_STARTED_AT
