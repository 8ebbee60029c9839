"""Table numbering check endpoints."""

from __future__ import annotations

import logging
import mimetypes
import re
import tempfile
from pathlib import Path
from typing import Literal

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from ..config import Settings, get_settings
from ..middleware import get_request_id
from ..observability import metrics_registry
from ..services.pipeline import TableCheckResult, check_document, check_text
from ..utils.errors import ImageLoadError, OCREngineError, TableCheckError

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB

router = APIRouter(prefix="/api/tables", tags=["tables"])


class TablePayload(BaseModel):
    number: str
    title: str
    line: int


class MisorderingPayload(BaseModel):
    index: int
    previous: str
    current: str


class CheckResponse(BaseModel):
    """Captions found in the document and the numbers that break ordering."""

    source: str | None = None
    comparison: str
    ok: bool
    tables: list[TablePayload]
    misordered: list[MisorderingPayload]
    flagged: list[str]
    messages: list[str] = Field(default_factory=list)
    text: str | None = None


class CheckTextRequest(BaseModel):
    text: str
    comparison: Literal["lexicographic", "numeric"] | None = None
    include_previous: bool | None = None
    include_text: bool = False


def _respond(result: TableCheckResult, *, used_ocr: bool, include_text: bool) -> CheckResponse:
    metrics_registry.check_finished(
        tables=len(result.headings),
        misordered=len(result.misorderings),
        used_ocr=used_ocr,
    )
    return CheckResponse(**result.to_dict(include_text=include_text))


def _safe_suffix(filename: str | None) -> str:
    suffix = Path(filename or "").suffix.lower()
    return suffix if re.fullmatch(r"\.[a-z0-9]{1,5}", suffix) else ""


def _resolve_content_type(upload: UploadFile) -> str | None:
    """Return the declared type, or one guessed from the filename when the client sent none."""

    declared = (upload.content_type or "").split(";")[0].strip().lower()
    if declared and declared != "application/octet-stream":
        return declared
    guessed, _ = mimetypes.guess_type(upload.filename or "")
    return guessed.lower() if guessed else None


def _error_detail(exc: TableCheckError) -> dict[str, object]:
    return {"code": exc.code, "message": str(exc), "request_id": get_request_id()}


@router.post("/check", response_model=CheckResponse)
def check_table_text(
    payload: CheckTextRequest, settings: Settings = Depends(get_settings)
) -> CheckResponse:
    """Check table numbering in text that has already been recognised."""

    result = check_text(
        payload.text,
        settings=settings,
        comparison=payload.comparison,
        include_previous=payload.include_previous,
    )
    return _respond(result, used_ocr=False, include_text=payload.include_text)


@router.post("/ocr", response_model=CheckResponse)
async def check_table_image(
    file: UploadFile = File(...),
    comparison: Literal["lexicographic", "numeric"] | None = None,
    include_previous: bool | None = None,
    include_text: bool = False,
    settings: Settings = Depends(get_settings),
) -> CheckResponse:
    """OCR an uploaded page image or PDF and check its table numbering."""

    content_type = _resolve_content_type(file)
    if content_type not in settings.allowed_mimetypes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Unsupported file type"
        )

    suffix = _safe_suffix(file.filename)
    if not suffix and content_type == "application/pdf":
        suffix = ".pdf"

    with tempfile.TemporaryDirectory(prefix="tablecheck-") as work_dir:
        target = Path(work_dir) / f"upload{suffix}"
        total_bytes = 0
        with target.open("wb") as buffer:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                total_bytes += len(chunk)
                if total_bytes > settings.max_upload_size:
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail="File exceeds maximum allowed size",
                    )
                buffer.write(chunk)

        try:
            result = await run_in_threadpool(
                check_document,
                target,
                settings=settings,
                comparison=comparison,
                include_previous=include_previous,
            )
        except ImageLoadError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=_error_detail(exc),
            ) from exc
        except OCREngineError as exc:
            LOGGER.warning(
                "OCR failed for %s (request %s): %s", file.filename, get_request_id(), exc
            )
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=_error_detail(exc),
            ) from exc

    result.source = file.filename
    return _respond(result, used_ocr=True, include_text=include_text)


__all__ = ["router", "CheckResponse", "CheckTextRequest"]
