"""Tesseract OCR session and page image loading."""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import Iterator

import fitz  # type: ignore
import pytesseract  # type: ignore
from PIL import Image, UnidentifiedImageError

from ..config import Settings
from ..utils.errors import ImageLoadError, OCREngineError

warnings.filterwarnings("ignore", category=DeprecationWarning, module="pytesseract")

LOGGER = logging.getLogger(__name__)

PDF_SUFFIXES = {".pdf"}


def load_image(path: Path) -> Image.Image:
    """Open ``path`` as a Pillow image, fully decoded."""

    if not path.exists():
        raise ImageLoadError(
            "image_not_found", f"Image not found: {path}", {"path": str(path)}
        )
    try:
        with Image.open(path) as handle:
            handle.load()
            return handle.copy()
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageLoadError(
            "image_unreadable",
            f"Image could not be decoded: {path}",
            {"path": str(path), "reason": str(exc)},
        ) from exc


def iter_pdf_page_images(path: Path, *, dpi: int = 300) -> Iterator[Image.Image]:
    """Rasterise each page of a PDF document into a Pillow image."""

    try:
        document = fitz.open(path)
    except RuntimeError as exc:
        raise ImageLoadError(
            "image_unreadable",
            f"PDF could not be opened: {path}",
            {"path": str(path), "reason": str(exc)},
        ) from exc
    with document:
        for page in document:
            pixmap = page.get_pixmap(dpi=dpi)
            mode = "RGBA" if pixmap.alpha else "RGB"
            yield Image.frombytes(mode, (pixmap.width, pixmap.height), pixmap.samples)


class TesseractEngine:
    """OCR engine handle, usable as a context manager.

    Entering verifies the tesseract binary is reachable; the configured
    binary path is restored on exit so sessions do not leak into each other.
    """

    def __init__(self, settings: Settings) -> None:
        self.languages = settings.ocr_languages
        self.oem = settings.ocr_oem
        self.psm = settings.ocr_psm
        self.tessdata_dir = settings.tessdata_dir
        self.tesseract_cmd = settings.tesseract_cmd
        self._previous_cmd: str | None = None
        self._active = False

    @property
    def config(self) -> str:
        parts = [f"--oem {self.oem}", f"--psm {self.psm}"]
        if self.tessdata_dir is not None:
            parts.append(f'--tessdata-dir "{self.tessdata_dir}"')
        return " ".join(parts)

    def open(self) -> "TesseractEngine":
        if self._active:
            return self
        self._previous_cmd = pytesseract.pytesseract.tesseract_cmd
        if self.tesseract_cmd is not None:
            pytesseract.pytesseract.tesseract_cmd = str(self.tesseract_cmd)
        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as exc:
            self._restore_cmd()
            raise OCREngineError(
                "engine_unavailable",
                "Tesseract executable not found",
                {"cmd": pytesseract.pytesseract.tesseract_cmd},
            ) from exc
        self._active = True
        LOGGER.debug(
            "tesseract %s ready (lang=%s, %s)", version, self.languages, self.config
        )
        return self

    def close(self) -> None:
        if not self._active:
            return
        self._restore_cmd()
        self._active = False

    def _restore_cmd(self) -> None:
        if self._previous_cmd is not None:
            pytesseract.pytesseract.tesseract_cmd = self._previous_cmd

    def __enter__(self) -> "TesseractEngine":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    def recognize(self, image: Image.Image) -> str:
        """Return the UTF-8 text tesseract reads from ``image``."""

        if not self._active:
            raise OCREngineError("engine_unavailable", "OCR engine is not open")
        try:
            return pytesseract.image_to_string(
                image, lang=self.languages, config=self.config
            )
        except pytesseract.TesseractError as exc:
            raise OCREngineError(
                "engine_failed",
                f"Tesseract failed: {exc.message}",
                {"status": exc.status, "lang": self.languages},
            ) from exc


def engine_available(settings: Settings) -> bool:
    """Return whether a tesseract session can be opened with ``settings``."""

    try:
        with TesseractEngine(settings):
            return True
    except OCREngineError:
        return False


def ocr_document(path: Path, engine: TesseractEngine, *, settings: Settings) -> str:
    """OCR an image or every page of a PDF; PDF pages are joined in order."""

    if path.suffix.lower() in PDF_SUFFIXES:
        if not path.exists():
            raise ImageLoadError(
                "image_not_found", f"Document not found: {path}", {"path": str(path)}
            )
        pages = [
            engine.recognize(image)
            for image in iter_pdf_page_images(path, dpi=settings.ocr_pdf_dpi)
        ]
        LOGGER.info("OCR read %d page(s) from %s", len(pages), path.name)
        return "\n".join(pages)

    text = engine.recognize(load_image(path))
    LOGGER.info("OCR read %d character(s) from %s", len(text), path.name)
    return text


__all__ = [
    "TesseractEngine",
    "engine_available",
    "iter_pdf_page_images",
    "load_image",
    "ocr_document",
]
