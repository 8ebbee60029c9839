"""Command-line interface: check table numbering in a scanned page or serve the API."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import COMPARISON_MODES, get_settings
from .services.pipeline import TableCheckResult, check_document, check_text
from .services.report import render_report
from .utils.errors import TableCheckError
from .utils.logging import configure_logging

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MISORDERED = 1
EXIT_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tablecheck", description=__doc__)
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser(
        "check", help="OCR a page image or PDF and report misnumbered tables"
    )
    check.add_argument("path", type=Path, help="Image, PDF, or (with --text) a UTF-8 text file")
    check.add_argument(
        "--text",
        action="store_true",
        help="Treat PATH as already recognised text and skip OCR",
    )
    check.add_argument("--json", action="store_true", help="Print the result as JSON")
    check.add_argument(
        "--comparison",
        choices=COMPARISON_MODES,
        default=None,
        help="How table numbers are compared (default from TABLECHECK_COMPARISON)",
    )
    check.add_argument(
        "--current-only",
        action="store_true",
        help="Report only the offending number, not its predecessor",
    )
    check.add_argument("--lang", default=None, help="Tesseract languages, e.g. eng+rus")
    check.add_argument(
        "--marker",
        action="append",
        default=None,
        help="Caption marker word; repeat for several (default: Таблица, Table)",
    )

    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")
    return parser


def _run_check(args: argparse.Namespace) -> int:
    settings = get_settings()
    overrides: dict[str, object] = {}
    if args.lang:
        overrides["ocr_languages"] = args.lang
    if args.marker:
        overrides["heading_markers"] = tuple(args.marker)
    if overrides:
        settings = settings.model_copy(update=overrides)

    path = args.path.expanduser()
    include_previous = False if args.current_only else None

    try:
        if args.text:
            result: TableCheckResult = check_text(
                path.read_text(encoding="utf-8"),
                settings=settings,
                comparison=args.comparison,
                include_previous=include_previous,
                source=path.name,
            )
        else:
            result = check_document(
                path,
                settings=settings,
                comparison=args.comparison,
                include_previous=include_previous,
            )
    except TableCheckError as exc:
        LOGGER.error("%s (%s)", exc, exc.code)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILED
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILED

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(render_report(result))
    return EXIT_OK if result.ok else EXIT_MISORDERED


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "tablecheck.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level,
        reload=args.reload,
    )
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    encoding = (getattr(sys.stdout, "encoding", None) or "").lower()
    if encoding not in {"utf-8", "utf8"} and hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8")
    configure_logging()
    if args.command == "serve":
        return _run_serve(args)
    return _run_check(args)


__all__ = ["build_parser", "main"]
