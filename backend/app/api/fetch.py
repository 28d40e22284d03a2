"""
Public fetch API endpoint.

``GET /api/fetch?url=<url>`` runs the URL through the SSRF guard and,
when it passes, fetches it server-side and returns the status and a
text snippet of the body.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from ..core.page_fetch import FetchError, fetch_url
from ..core.ssrf_guard import validate_url
from ..models.schemas import ErrorResponse, FetchResponse


logger = logging.getLogger("fetch_api")

router = APIRouter(prefix="/api", tags=["fetch"])


def _error(code: int, message: str, detail: Optional[str] = None) -> JSONResponse:
    payload = ErrorResponse(error=message, detail=detail)
    return JSONResponse(status_code=code, content=payload.model_dump(exclude_none=True))


@router.get("/fetch")
async def fetch_endpoint(url: Optional[str] = Query(default=None)) -> JSONResponse:
    target = (url or "").strip()
    if not target:
        return _error(status.HTTP_400_BAD_REQUEST, "url parameter required")

    decision = validate_url(target)
    if not decision.allowed:
        logger.warning("fetch blocked: kind=%s url=%s", decision.kind, target)
        if decision.kind == "forbidden":
            return _error(status.HTTP_403_FORBIDDEN, decision.reason or "forbidden")
        return _error(status.HTTP_400_BAD_REQUEST, decision.reason or "bad request")

    try:
        result = await fetch_url(target)
    except FetchError as exc:
        logger.info("fetch failed: kind=%s url=%s detail=%s", exc.kind, target, exc.detail)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "fetch failed", exc.detail)

    logger.info("fetch ok: status=%s truncated=%s url=%s", result.status_code, result.truncated, target)
    payload = FetchResponse(status=result.status_code, url=result.url, body=result.body)
    return JSONResponse(status_code=status.HTTP_200_OK, content=payload.model_dump())
