"""Test configuration for tablecheck."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Generator

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from tablecheck.config import reset_settings_cache  # noqa: E402
from tablecheck.observability import metrics_registry  # noqa: E402

_ENV_VARS = (
    "TABLECHECK_MARKERS",
    "TABLECHECK_COMPARISON",
    "TABLECHECK_FLAG_PREVIOUS",
    "OCR_LANGUAGES",
    "OCR_PIPE_AS_ONE",
    "TESSDATA_PREFIX",
    "TESSERACT_CMD",
    "ALLOWED_MIMETYPES",
)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Give each test settings derived from a clean environment."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MAX_UPLOAD_SIZE", str(64 * 1024))
    reset_settings_cache()
    metrics_registry.reset()
    yield
    reset_settings_cache()
    metrics_registry.reset()


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    """Return a test client for the FastAPI application."""

    from tablecheck.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def fake_tesseract(monkeypatch: pytest.MonkeyPatch):
    """Replace the tesseract binary calls with canned output.

    Returns a dict; set ``text`` to control what ``image_to_string`` reads and
    inspect ``calls`` for the arguments it received.
    """

    import pytesseract

    state: dict[str, object] = {"text": "", "calls": [], "version": "5.3.0"}

    def fake_version():
        if state["version"] is None:
            raise pytesseract.TesseractNotFoundError()
        return state["version"]

    def fake_image_to_string(image, lang=None, config=""):
        state["calls"].append({"size": image.size, "lang": lang, "config": config})
        return state["text"]

    monkeypatch.setattr(pytesseract, "get_tesseract_version", fake_version)
    monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)
    return state
