"""
Server-Side Request Forgery (SSRF) guard for the public fetch endpoint.

This module exposes a single helper function `validate_url` which
decides whether a URL supplied to ``/api/fetch`` may be fetched. The
check is purely textual: the lowercased URL is compared against a
small set of forbidden substrings, then the scheme prefix is checked.

Nothing is resolved or canonicalised. Alternate spellings of the
loopback address (``2130706433``, ``0177.0.0.1``, ``0x7f.0.0.1``,
``[0:0:0:0:0:0:0:1]``) are not in the set and therefore pass. That gap
is the challenge; keep it that way.
"""

from __future__ import annotations

import re

from ..models.schemas import ValidationDecision


FORBIDDEN_SUBSTRINGS = ("localhost", "127.0.0.1", "::1")

FORBIDDEN_REASON = "local addresses are not allowed"
UNSUPPORTED_SCHEME_REASON = "only http and https allowed"

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def validate_url(url: str) -> ValidationDecision:
    """Check a candidate URL against the forbidlist and the scheme rule.

    The forbidlist runs first, so ``ftp://localhost/`` is reported as
    forbidden rather than as an unsupported scheme.
    """
    lowered = url.lower()
    if any(blocked in lowered for blocked in FORBIDDEN_SUBSTRINGS):
        return ValidationDecision(allowed=False, kind="forbidden", reason=FORBIDDEN_REASON)
    if not _SCHEME_RE.match(url):
        return ValidationDecision(
            allowed=False,
            kind="unsupported_scheme",
            reason=UNSUPPORTED_SCHEME_REASON,
        )
    return ValidationDecision(allowed=True)
