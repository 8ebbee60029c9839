"""Tests for configuration helpers."""

from __future__ import annotations

import importlib

import tablecheck.config as config


def test_defaults_read_russian_and_english_captions() -> None:
    settings = config.Settings()

    assert settings.heading_markers == ("Таблица", "Table")
    assert settings.ordering_comparison == "lexicographic"
    assert settings.ordering_flag_previous is True
    assert settings.ocr_languages == "eng+rus"
    assert settings.ocr_oem == 1
    assert settings.ocr_pipe_as_one is True
    assert settings.tessdata_dir is None


def test_markers_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("TABLECHECK_MARKERS", " Tabelle , Table ,, Tabelle")
    assert config.Settings().heading_markers == ("Tabelle", "Table")


def test_blank_markers_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("TABLECHECK_MARKERS", " , ")
    assert config.Settings().heading_markers == config.DEFAULT_MARKERS


def test_unknown_comparison_mode_is_normalised(monkeypatch) -> None:
    monkeypatch.setenv("TABLECHECK_COMPARISON", "Roman")
    assert config.Settings().ordering_comparison == "lexicographic"

    monkeypatch.setenv("TABLECHECK_COMPARISON", " NUMERIC ")
    assert config.Settings().ordering_comparison == "numeric"


def test_blank_cors_regex_disables_pattern(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ALLOW_ORIGIN_REGEX", "   ")
    assert config.Settings().cors_allow_origin_regex is None


def test_get_settings_is_cached_until_reset(monkeypatch) -> None:
    first = config.get_settings()
    assert config.get_settings() is first

    monkeypatch.setenv("OCR_LANGUAGES", "eng")
    config.reset_settings_cache()
    assert config.get_settings().ocr_languages == "eng"


def test_values_loaded_from_env_file(monkeypatch, tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("OCR_LANGUAGES=rus\n", encoding="utf-8")

    monkeypatch.delenv("OCR_LANGUAGES", raising=False)
    monkeypatch.setenv("TABLECHECK_ENV_FILE", str(env_file))

    module = importlib.reload(config)
    assert module.Settings().ocr_languages == "rus"

    monkeypatch.delenv("OCR_LANGUAGES", raising=False)


def test_separator_only_markers_fall_back_to_defaults(monkeypatch) -> None:
    from tablecheck.services.pipeline import check_text

    monkeypatch.setenv("TABLECHECK_MARKERS", ",")
    settings = config.Settings()

    assert settings.heading_markers == config.DEFAULT_MARKERS
    assert check_text("  3 apples\n  1 pear", settings=settings).headings == []


def test_mimetypes_are_lowercased_and_deduplicated(monkeypatch) -> None:
    monkeypatch.setenv("ALLOWED_MIMETYPES", "Image/PNG, image/png ,APPLICATION/PDF")
    assert config.Settings().allowed_mimetypes == ("image/png", "application/pdf")


def test_pdf_dpi_is_clamped(monkeypatch) -> None:
    monkeypatch.setenv("OCR_PDF_DPI", "5")
    assert config.Settings().ocr_pdf_dpi == 72

    monkeypatch.setenv("OCR_PDF_DPI", "9600")
    assert config.Settings().ocr_pdf_dpi == 1200
