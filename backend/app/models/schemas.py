"""
Pydantic data models for the SSRF lab backend.

These models describe the values that travel between the public
gateway, the URL policy and the outbound fetcher. They are frozen:
a decision or a fetch result is produced once per request and never
modified afterwards.

The response models (``FetchResponse``, ``ErrorResponse``,
``InfoResponse``) mirror the JSON bodies returned to callers so the
route handlers and the tests agree on a single shape.

Note: Pydantic v2 is used throughout this project.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


RejectionKind = Literal["forbidden", "unsupported_scheme"]


class ValidationDecision(BaseModel):
    """Outcome of running the URL policy against a candidate URL.

    Attributes:
        allowed: True when the URL may be handed to the fetcher.
        kind: Which rule rejected the URL, or None when allowed.
        reason: Human readable rejection message, or None when allowed.
    """

    allowed: bool = Field(..., description="Whether the URL may be fetched")
    kind: Optional[RejectionKind] = Field(default=None, description="Rejecting rule")
    reason: Optional[str] = Field(default=None, description="Rejection message")

    model_config = ConfigDict(frozen=True, extra="forbid")


class FetchResult(BaseModel):
    """A completed outbound fetch.

    Attributes:
        status_code: HTTP status of the final response (after redirects).
        url: The URL exactly as the caller supplied it.
        body: Response text, cut to the maximum size when needed.
        truncated: True when ``body`` was cut and carries the marker.
    """

    status_code: int = Field(..., description="HTTP status of the final response")
    url: str = Field(..., description="Echo of the requested URL")
    body: str = Field(..., description="Possibly truncated response text")
    truncated: bool = Field(default=False, description="Whether the body was cut")

    model_config = ConfigDict(frozen=True, extra="forbid")


class FetchResponse(BaseModel):
    status: int
    url: str
    body: str


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None


class InfoResponse(BaseModel):
    name: str
    endpoints: List[str]
    note: str


class InternalInfoResponse(BaseModel):
    name: str
    uptime: float
