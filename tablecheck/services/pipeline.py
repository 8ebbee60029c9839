"""Check pipeline: OCR text → table captions → ordering violations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..config import Settings
from .headings import TableHeading, extract_table_headings
from .normalize import normalize_ocr_text
from .ocr import TesseractEngine, ocr_document
from .ordering import Misordering, find_misorderings, flagged_numbers

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class TableCheckResult:
    """Outcome of one extraction and validation pass."""

    headings: list[TableHeading]
    misorderings: list[Misordering]
    flagged: list[str]
    comparison: str
    text: str = ""
    source: str | None = None
    messages: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.misorderings

    def to_dict(self, *, include_text: bool = False) -> dict[str, object]:
        """Return a JSON-compatible representation of the result."""

        payload: dict[str, object] = {
            "source": self.source,
            "comparison": self.comparison,
            "ok": self.ok,
            "tables": [heading.to_dict() for heading in self.headings],
            "misordered": [entry.to_dict() for entry in self.misorderings],
            "flagged": list(self.flagged),
            "messages": list(self.messages),
        }
        if include_text:
            payload["text"] = self.text
        return payload


def check_text(
    text: str,
    *,
    settings: Settings,
    comparison: str | None = None,
    include_previous: bool | None = None,
    source: str | None = None,
) -> TableCheckResult:
    """Extract table captions from ``text`` and validate their numbering."""

    mode = comparison or settings.ordering_comparison
    if include_previous is None:
        include_previous = settings.ordering_flag_previous

    normalised = normalize_ocr_text(text, pipe_as_one=settings.ocr_pipe_as_one)
    headings = extract_table_headings(normalised, markers=settings.heading_markers)
    misorderings = find_misorderings(headings, comparison=mode)
    result = TableCheckResult(
        headings=headings,
        misorderings=misorderings,
        flagged=flagged_numbers(misorderings, include_previous=include_previous),
        comparison=mode,
        text=normalised,
        source=source,
    )
    if not headings:
        result.messages.append("No table captions found.")
    LOGGER.info(
        "found %d table caption(s), %d misordered (%s)",
        len(headings),
        len(misorderings),
        mode,
    )
    return result


def check_document(
    path: Path,
    *,
    settings: Settings,
    engine: TesseractEngine | None = None,
    comparison: str | None = None,
    include_previous: bool | None = None,
) -> TableCheckResult:
    """OCR ``path`` and check the table numbering found in it.

    When ``engine`` is omitted a session is opened for this document only.
    """

    if engine is None:
        with TesseractEngine(settings) as session:
            text = ocr_document(path, session, settings=settings)
    else:
        text = ocr_document(path, engine, settings=settings)
    return check_text(
        text,
        settings=settings,
        comparison=comparison,
        include_previous=include_previous,
        source=path.name,
    )


__all__ = ["TableCheckResult", "check_document", "check_text"]
