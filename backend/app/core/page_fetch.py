"""
Outbound page fetch for the public ``/api/fetch`` endpoint.

The request is issued with ``urllib.request`` in a worker thread so a
slow upstream only holds up its own caller. Redirects to http and https
targets are followed and are not re-checked against the URL policy;
redirects to any other scheme fail the fetch.
"""

from __future__ import annotations

import asyncio
import socket
import urllib.error
import urllib.parse
import urllib.request
from typing import Literal, Tuple

from ..models.schemas import FetchResult


FETCH_TIMEOUT_SECONDS = 5.0
MAX_BODY_CHARS = 2000
TRUNCATION_MARKER = "\n\n...[truncated]"


class _HttpRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Redirect handler that only follows http and https targets."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        scheme = urllib.parse.urlsplit(newurl).scheme.lower()
        if scheme not in {"http", "https"}:
            fp.close()
            raise urllib.error.URLError(f"redirect to unsupported scheme: {newurl}")
        return super().redirect_request(req, fp, code, msg, headers, newurl)


# Direct connections only: environment proxy settings are not honoured.
_OPENER = urllib.request.build_opener(urllib.request.ProxyHandler({}), _HttpRedirectHandler)


class FetchError(Exception):
    """Raised when the outbound request does not produce a response."""

    def __init__(self, kind: Literal["timeout", "network"], detail: str) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail


def truncate_body(text: str, limit: int = MAX_BODY_CHARS) -> Tuple[str, bool]:
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER, True
    return text, False


def _decode(raw: bytes, charset: str | None) -> str:
    try:
        return raw.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return raw.decode("utf-8", errors="replace")


def _fetch_sync(url: str, timeout: float) -> Tuple[int, str]:
    req = urllib.request.Request(
        url,
        headers={"User-Agent": "devs-legacy-fetch/1.0", "Accept": "*/*"},
        method="GET",
    )
    try:
        with _OPENER.open(req, timeout=timeout) as response:
            status = int(getattr(response, "status", 200) or 200)
            charset = response.headers.get_content_charset()
            body = response.read()
    except urllib.error.HTTPError as exc:
        # A 3xx with a target here means the redirect handler gave up
        # (loop, too many hops or a refused scheme).
        if 300 <= exc.code < 400 and exc.headers and (exc.headers.get("Location") or exc.headers.get("URI")):
            exc.close()
            raise FetchError("network", f"redirect failed: {exc}") from exc
        # 4xx/5xx still carry a body; the caller sees them like any other status.
        charset = exc.headers.get_content_charset() if exc.headers else None
        try:
            body = exc.read()
        finally:
            exc.close()
        return int(exc.code), _decode(body, charset)
    return status, _decode(body, charset)


async def fetch_url(url: str, timeout: float = FETCH_TIMEOUT_SECONDS) -> FetchResult:
    """GET ``url`` and return its status and (possibly truncated) text.

    Raises:
        FetchError: ``kind="timeout"`` when the whole request exceeds
            ``timeout`` seconds, ``kind="network"`` for DNS, connection,
            TLS or URL errors and for failed redirects.
    """
    try:
        status, text = await asyncio.wait_for(
            asyncio.to_thread(_fetch_sync, url, timeout),
            timeout=timeout,
        )
    except FetchError:
        raise
    except asyncio.TimeoutError as exc:
        raise FetchError("timeout", f"request to {url} timed out after {int(timeout * 1000)} ms") from exc
    except socket.timeout as exc:
        raise FetchError("timeout", str(exc)) from exc
    except urllib.error.URLError as exc:
        if isinstance(exc.reason, socket.timeout):
            raise FetchError("timeout", str(exc)) from exc
        raise FetchError("network", str(exc)) from exc
    except (OSError, ValueError) as exc:
        raise FetchError("network", str(exc)) from exc
    except Exception as exc:
        # http.client protocol errors and the like
        raise FetchError("network", str(exc)) from exc

    body, truncated = truncate_body(text)
    return FetchResult(status_code=status, url=url, body=body, truncated=truncated)
