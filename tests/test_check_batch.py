"""Tests for the batch checking script."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path

from PIL import Image

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "check_batch.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("check_batch", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_batch_writes_summary(tmp_path: Path, capsys, fake_tesseract) -> None:
    scans = tmp_path / "scans"
    scans.mkdir()
    Image.new("RGB", (10, 10)).save(scans / "a.png")
    (scans / "b.png").write_bytes(b"broken")
    (scans / "notes.txt").write_text("Table 1", encoding="utf-8")
    fake_tesseract["text"] = "Table 2 A\nTable 1 B"
    output = tmp_path / "summary.json"

    code = _load_script().main([str(scans), "--output", str(output)])

    assert code == 1
    summary = json.loads(output.read_text(encoding="utf-8"))
    assert [entry["source"] for entry in summary] == ["a.png", "b.png"]
    assert summary[0]["flagged"] == ["2", "1"]
    assert summary[1] == {"source": "b.png", "error": "image_unreadable"}
    assert "2 with problems" in capsys.readouterr().out


def test_batch_without_tesseract_exits_with_error(
    tmp_path: Path, capsys, fake_tesseract
) -> None:
    scans = tmp_path / "scans"
    scans.mkdir()
    Image.new("RGB", (10, 10)).save(scans / "a.png")
    fake_tesseract["version"] = None
    output = tmp_path / "summary.json"

    code = _load_script().main([str(scans), "--output", str(output)])

    assert code == 2
    assert not output.exists()
    assert "Tesseract executable not found" in capsys.readouterr().err


def test_batch_records_engine_failures_and_continues(
    tmp_path: Path, monkeypatch, fake_tesseract
) -> None:
    import pytesseract

    scans = tmp_path / "scans"
    scans.mkdir()
    Image.new("RGB", (10, 10)).save(scans / "a.png")
    Image.new("RGB", (10, 10)).save(scans / "b.png")
    calls = {"count": 0}

    def flaky(image, lang=None, config=""):
        calls["count"] += 1
        if calls["count"] == 1:
            raise pytesseract.TesseractError(1, "Failed loading language 'rus'")
        return "Table 1 A"

    monkeypatch.setattr(pytesseract, "image_to_string", flaky)
    output = tmp_path / "summary.json"

    code = _load_script().main([str(scans), "--output", str(output)])

    assert code == 1
    summary = json.loads(output.read_text(encoding="utf-8"))
    assert summary[0] == {"source": "a.png", "error": "engine_failed"}
    assert summary[1]["ok"] is True
