"""Routes that expose operational observability data."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from .. import __version__
from ..config import Settings, get_settings
from ..observability import metrics_registry
from ..services.ocr import engine_available

router = APIRouter(prefix="/api", tags=["observability"])


@router.get("/metrics")
def read_metrics() -> dict[str, object]:
    """Return the current request and check counters."""

    return metrics_registry.snapshot()


@router.get("/status")
def read_status(settings: Settings = Depends(get_settings)) -> dict[str, object]:
    """Return version, OCR engine availability and metrics in one payload."""

    return {
        "app": {"version": __version__},
        "ocr": {
            "ok": engine_available(settings),
            "languages": settings.ocr_languages,
        },
        "metrics": metrics_registry.snapshot(),
    }


__all__ = ["router"]
