"""Line-by-line extraction of numbered table captions from OCR text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterator, Sequence

from ..config import DEFAULT_MARKERS

LOGGER = logging.getLogger(__name__)

NUMERAL = r"\d+(?:\.\d+)*"
# Separator run between the numeral and the title ("Table 3.1. Title", "Table 2 - Title").
SEPARATORS = r"[\s.:\-–—]*"


@dataclass(frozen=True, slots=True)
class TableHeading:
    """A matched table caption: its numeral and the (possibly empty) title."""

    number: str
    title: str
    line_no: int = field(default=0, compare=False)

    def to_dict(self) -> dict[str, object]:
        return {"number": self.number, "title": self.title, "line": self.line_no}


@lru_cache(maxsize=32)
def build_heading_pattern(markers: Sequence[str] = DEFAULT_MARKERS) -> re.Pattern[str]:
    """Compile the per-line caption pattern for the given marker words.

    An empty marker set falls back to :data:`DEFAULT_MARKERS`; a blank
    alternative would turn every indented number into a caption.
    """

    words = {marker for marker in markers if marker.strip()} or set(DEFAULT_MARKERS)
    alternatives = "|".join(
        re.escape(marker) for marker in sorted(words, key=len, reverse=True)
    )
    return re.compile(
        rf"^\s*(?:{alternatives})\s+(?P<number>{NUMERAL}){SEPARATORS}(?P<title>.*)$"
    )


def iter_table_headings(
    text: str, *, markers: Sequence[str] = DEFAULT_MARKERS
) -> Iterator[TableHeading]:
    """Yield a :class:`TableHeading` for every line of ``text`` that is a caption.

    Each physical line is matched on its own, so a title wrapped onto the next
    line is not merged. Only newlines separate lines; other control characters
    OCR may emit stay inside the line. Lines that do not match contribute
    nothing.
    """

    pattern = build_heading_pattern(tuple(markers))
    for line_no, line in enumerate(text.split("\n"), start=1):
        match = pattern.match(line)
        if match is None:
            continue
        heading = TableHeading(
            number=match.group("number"),
            title=(match.group("title") or "").strip(),
            line_no=line_no,
        )
        LOGGER.trace("line %d matched table %s", line_no, heading.number)  # type: ignore[attr-defined]
        yield heading


def extract_table_headings(
    text: str, *, markers: Sequence[str] = DEFAULT_MARKERS
) -> list[TableHeading]:
    """Return all table captions found in ``text`` in line order."""

    return list(iter_table_headings(text, markers=markers))


__all__ = [
    "TableHeading",
    "build_heading_pattern",
    "extract_table_headings",
    "iter_table_headings",
]
