"""Descriptive and liveness endpoints for the public app."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from ..models.schemas import InfoResponse


router = APIRouter(prefix="/api", tags=["health"])


PUBLIC_ENDPOINTS = ["/api/fetch?url=...", "/api/info", "/api/health"]


@router.get("/info", response_model=InfoResponse)
async def info() -> InfoResponse:
    """List the public endpoints."""
    return InfoResponse(
        name="DEVS legacy (SSRF demo)",
        endpoints=PUBLIC_ENDPOINTS,
        note="Public fetch tool blocks obvious local hostnames but not all IP encodings.",
    )


@router.get("/health", response_class=PlainTextResponse)
async def health() -> str:
    return "ok"
