#!/usr/bin/env python3
"""Check table numbering in every scan under a directory and write a JSON summary."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tablecheck.config import get_settings  # noqa: E402
from tablecheck.services.ocr import TesseractEngine  # noqa: E402
from tablecheck.services.pipeline import check_document  # noqa: E402
from tablecheck.utils.errors import OCREngineError, TableCheckError  # noqa: E402
from tablecheck.utils.logging import configure_logging  # noqa: E402

SUFFIXES = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".pdf"}


def _write_json(target: Path, payload: Any) -> None:
    """Serialise *payload* to ``target`` with UTF-8 encoding."""

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(
        json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("directory", type=Path, help="Directory containing scans")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("reports/table_numbering.json"),
        help="Where to write the JSON summary",
    )
    args = parser.parse_args(argv)

    directory = args.directory.expanduser().resolve()
    if not directory.is_dir():
        parser.error(f"Directory not found: {directory}")

    configure_logging()
    settings = get_settings()
    scans = sorted(p for p in directory.iterdir() if p.suffix.lower() in SUFFIXES)

    results: list[dict[str, Any]] = []
    # One engine session serves the whole batch.
    try:
        engine = TesseractEngine(settings).open()
    except OCREngineError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    try:
        for scan in scans:
            try:
                result = check_document(scan, settings=settings, engine=engine)
            except TableCheckError as exc:
                results.append({"source": scan.name, "error": exc.code})
                continue
            results.append(result.to_dict())
    finally:
        engine.close()

    _write_json(args.output, results)
    failing = [entry["source"] for entry in results if not entry.get("ok", False)]
    print(f"Checked {len(results)} file(s); {len(failing)} with problems")
    for name in failing:
        print(f"- {name}")
    print(f"Summary written to {args.output}")
    return 1 if failing else 0


if __name__ == "__main__":
    raise SystemExit(main())
