"""tablecheck HTTP API entrypoint."""

from __future__ import annotations

import logging
import re

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .middleware import RequestIdMiddleware, SecurityHeadersMiddleware
from .observability import RequestMetricsMiddleware
from .routers import ROUTERS

settings = get_settings()
logger = logging.getLogger("uvicorn.error")

cors_allow_origins = list(settings.cors_allow_origins)
allow_credentials = True
if "*" in cors_allow_origins:
    cors_allow_origins = ["*"]
    allow_credentials = False

_cors_origin_pattern = (
    re.compile(settings.cors_allow_origin_regex)
    if settings.cors_allow_origin_regex
    else None
)

app = FastAPI(title="tablecheck", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins,
    allow_credentials=allow_credentials,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    allow_origin_regex=settings.cors_allow_origin_regex,
)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(RequestMetricsMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

for router in ROUTERS:
    app.include_router(router)


def _allowed_origin(origin: str) -> str | None:
    if cors_allow_origins == ["*"]:
        return "*"
    if origin in cors_allow_origins:
        return origin
    if _cors_origin_pattern and _cors_origin_pattern.fullmatch(origin):
        return origin
    return None


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 (with CORS headers) for anything a route did not handle."""

    logger.exception(
        "Unhandled exception while processing %s %s", request.method, request.url.path
    )
    headers: dict[str, str] = {}
    origin = request.headers.get("origin")
    allowed = _allowed_origin(origin) if origin else None
    if allowed:
        headers["Access-Control-Allow-Origin"] = allowed
        headers["Vary"] = "Origin"
        if allow_credentials and allowed != "*":
            headers["Access-Control-Allow-Credentials"] = "true"

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"},
        headers=headers or None,
    )


__all__ = ["app"]
