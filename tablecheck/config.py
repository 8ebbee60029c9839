"""Configuration utilities for tablecheck."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _env_flag(name: str, default: bool) -> bool:
    """Return a boolean flag derived from environment variables."""

    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> Tuple[str, ...]:
    """Return a tuple of trimmed, non-empty items from a comma-delimited variable."""

    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent

DEFAULT_MARKERS: Tuple[str, ...] = ("Таблица", "Table")
COMPARISON_MODES: Tuple[str, ...] = ("lexicographic", "numeric")
DEFAULT_MIMETYPES: Tuple[str, ...] = (
    "image/png",
    "image/jpeg",
    "image/tiff",
    "image/bmp",
    "application/pdf",
)


def _load_environment() -> None:
    """Load environment variables from a ``.env`` file if present."""

    explicit_path = os.getenv("TABLECHECK_ENV_FILE")
    candidates = []

    if explicit_path:
        candidates.append(Path(explicit_path))

    candidates.append(PROJECT_ROOT / ".env")

    for candidate in candidates:
        try_path = candidate.expanduser()
        if try_path.exists():
            load_dotenv(try_path, override=False)


_load_environment()


def _cors_origin_regex_default() -> str | None:
    """Return the default CORS origin regex allowing local network hosts."""

    raw = os.getenv(
        "CORS_ALLOW_ORIGIN_REGEX",
        r"http://(?:localhost|127\.0\.0\.1|0\.0\.0\.0|(?:\d{1,3}\.){3}\d{1,3})(?::\d{1,5})?",
    )
    raw = raw.strip()
    return raw or None


def _optional_path(name: str) -> Path | None:
    raw = (os.getenv(name) or "").strip()
    return Path(raw) if raw else None


class Settings(BaseModel):
    """Application configuration loaded from environment variables."""

    # Every field comes from a default_factory; validators must still see them.
    model_config = ConfigDict(validate_default=True)

    heading_markers: Tuple[str, ...] = Field(
        default_factory=lambda: _env_list("TABLECHECK_MARKERS", ",".join(DEFAULT_MARKERS))
    )
    ordering_comparison: str = Field(
        default_factory=lambda: os.getenv("TABLECHECK_COMPARISON", "lexicographic")
    )
    ordering_flag_previous: bool = Field(
        default_factory=lambda: _env_flag("TABLECHECK_FLAG_PREVIOUS", True)
    )
    ocr_languages: str = Field(
        default_factory=lambda: os.getenv("OCR_LANGUAGES", "eng+rus")
    )
    ocr_oem: int = Field(default_factory=lambda: int(os.getenv("OCR_OEM", "1")))
    ocr_psm: int = Field(default_factory=lambda: int(os.getenv("OCR_PSM", "3")))
    tessdata_dir: Path | None = Field(
        default_factory=lambda: _optional_path("TESSDATA_PREFIX")
    )
    tesseract_cmd: Path | None = Field(
        default_factory=lambda: _optional_path("TESSERACT_CMD")
    )
    ocr_pdf_dpi: int = Field(
        default_factory=lambda: int(os.getenv("OCR_PDF_DPI", "300"))
    )
    ocr_pipe_as_one: bool = Field(
        default_factory=lambda: _env_flag("OCR_PIPE_AS_ONE", True)
    )
    max_upload_size: int = Field(
        default_factory=lambda: int(os.getenv("MAX_UPLOAD_SIZE", str(25 * 1024 * 1024)))
    )
    allowed_mimetypes: Tuple[str, ...] = Field(
        default_factory=lambda: _env_list("ALLOWED_MIMETYPES", ",".join(DEFAULT_MIMETYPES))
    )
    cors_allow_origins: Tuple[str, ...] = Field(
        default_factory=lambda: _env_list("CORS_ALLOW_ORIGINS", "")
    )
    cors_allow_origin_regex: str | None = Field(default_factory=_cors_origin_regex_default)
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "info"))

    @field_validator("heading_markers", mode="after")
    @classmethod
    def _default_markers(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            return DEFAULT_MARKERS
        return tuple(dict.fromkeys(value))

    @field_validator("ordering_comparison", mode="after")
    @classmethod
    def _normalise_comparison(cls, value: str) -> str:
        mode = value.strip().lower()
        return mode if mode in COMPARISON_MODES else "lexicographic"

    @field_validator("allowed_mimetypes", mode="after")
    @classmethod
    def _normalise_mimetypes(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            return DEFAULT_MIMETYPES
        return tuple(dict.fromkeys(item.lower() for item in value))

    @field_validator("ocr_pdf_dpi", mode="after")
    @classmethod
    def _clamp_dpi(cls, value: int) -> int:
        return max(72, min(1200, value))


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached settings so that subsequent calls reload from the environment."""

    get_settings.cache_clear()


__all__ = [
    "COMPARISON_MODES",
    "DEFAULT_MARKERS",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
