"""Table caption extraction and numbering checks for OCR'd documents."""

from __future__ import annotations

from .utils.logging import TRACE_LEVEL

__version__ = "0.1.0"

__all__ = ["TRACE_LEVEL", "__version__"]
