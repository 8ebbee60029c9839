"""Liveness check endpoint."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel


class HealthResponse(BaseModel):
    ok: bool


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Service health status")
def read_health() -> HealthResponse:
    """Report that the API process is up; does not touch the OCR engine."""

    return HealthResponse(ok=True)


__all__ = ["router", "HealthResponse", "read_health"]
