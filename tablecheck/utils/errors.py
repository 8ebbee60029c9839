from __future__ import annotations

from typing import Any, Dict


class TableCheckError(Exception):
    """Base class for failures raised around the extraction core."""

    def __init__(self, code: str, message: str, extra: Dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.extra = extra or {}


class ImageLoadError(TableCheckError):
    """Raised when a page image cannot be located or decoded."""


class OCREngineError(TableCheckError):
    """Raised when the OCR engine cannot be initialised or fails mid-run."""
