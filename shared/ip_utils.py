"""Client IP resolution for log context."""

from __future__ import annotations

from fastapi import Request

# Checked in order; the first non-empty value wins
_PROXY_HEADERS: tuple[str, ...] = (
    "CF-Connecting-IP",
    "X-Forwarded-For",
    "X-Real-IP",
)


def get_client_ip(request: Request) -> str:
    """Return the originating client IP, or ``""`` if none is known.

    ``X-Forwarded-For`` may carry a chain; only its first hop is used.
    """
    for header in _PROXY_HEADERS:
        value = request.headers.get(header)
        if value:
            first = value.split(",")[0].strip()
            if first:
                return first

    return request.client.host if request.client else ""
