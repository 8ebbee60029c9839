"""ASGI middleware: request identifiers and response hardening."""

from __future__ import annotations

import re
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .utils.logging import REQUEST_ID as _REQUEST_ID

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Cache-Control": "no-store",
}


def get_request_id(default: str | None = None) -> str | None:
    """Return the identifier of the request being served, if any."""

    return _REQUEST_ID.get(default)


def _accept_request_id(value: str | None) -> str:
    if value:
        candidate = value.strip()
        if _REQUEST_ID_PATTERN.match(candidate):
            return candidate
    return uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Echo or mint an ``X-Request-ID`` and expose it through a context variable."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        request_id = _accept_request_id(request.headers.get(self.header_name))
        token = _REQUEST_ID.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _REQUEST_ID.reset(token)
        response.headers[self.header_name] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add :data:`SECURITY_HEADERS` to every response that lacks them."""

    def __init__(self, app: ASGIApp, headers: dict[str, str] | None = None) -> None:
        super().__init__(app)
        self._headers = dict(SECURITY_HEADERS if headers is None else headers)

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in self._headers.items():
            response.headers.setdefault(name, value)
        return response


__all__ = [
    "RequestIdMiddleware",
    "SECURITY_HEADERS",
    "SecurityHeadersMiddleware",
    "get_request_id",
]
