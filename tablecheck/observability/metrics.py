"""In-process counters for API requests and table checks."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from threading import Lock
from time import perf_counter
from typing import Dict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


@dataclass
class RouteStats:
    count: int = 0
    total_duration_ms: float = 0.0
    max_duration_ms: float = 0.0


class MetricsRegistry:
    """Thread-safe collector shared by all requests in the process."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.reset()

    def reset(self) -> None:
        """Zero every counter (used between tests)."""

        with self._lock:
            self._requests_total = 0
            self._status_families: Counter[str] = Counter()
            self._routes: Dict[str, RouteStats] = {}
            self._checks: Counter[str] = Counter()

    def request_finished(
        self, method: str, path: str, status_code: int, duration_seconds: float
    ) -> None:
        duration_ms = max(duration_seconds * 1000.0, 0.0)
        with self._lock:
            self._requests_total += 1
            self._status_families[f"{status_code // 100}xx"] += 1
            stats = self._routes.setdefault(f"{method.upper()} {path}", RouteStats())
            stats.count += 1
            stats.total_duration_ms += duration_ms
            stats.max_duration_ms = max(stats.max_duration_ms, duration_ms)

    def check_finished(self, *, tables: int, misordered: int, used_ocr: bool) -> None:
        """Record the outcome of one extraction and validation pass."""

        with self._lock:
            self._checks["documents"] += 1
            self._checks["tables"] += tables
            self._checks["misordered"] += misordered
            if misordered:
                self._checks["documents_with_errors"] += 1
            if used_ocr:
                self._checks["ocr_runs"] += 1

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            routes = {
                key: {
                    "count": stats.count,
                    "avg_duration_ms": stats.total_duration_ms / (stats.count or 1),
                    "max_duration_ms": stats.max_duration_ms,
                }
                for key, stats in self._routes.items()
            }
            return {
                "requests_total": self._requests_total,
                "status_codes": dict(self._status_families),
                "routes": routes,
                "checks": {
                    name: self._checks.get(name, 0)
                    for name in (
                        "documents",
                        "tables",
                        "misordered",
                        "documents_with_errors",
                        "ocr_runs",
                    )
                },
            }


class RequestMetricsMiddleware(BaseHTTPMiddleware):
    """Time each request and report it to the registry."""

    def __init__(self, app: ASGIApp, *, registry: MetricsRegistry | None = None) -> None:
        super().__init__(app)
        self._registry = registry or metrics_registry

    async def dispatch(self, request: Request, call_next):
        start = perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            self._registry.request_finished(
                request.method, request.url.path, status_code, perf_counter() - start
            )


metrics_registry = MetricsRegistry()

__all__ = [
    "MetricsRegistry",
    "RequestMetricsMiddleware",
    "RouteStats",
    "metrics_registry",
]
