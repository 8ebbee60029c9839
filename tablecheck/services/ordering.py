"""Detection of table numbers that break strictly increasing order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from .headings import TableHeading

HeadingLike = Union[TableHeading, str]

LEXICOGRAPHIC = "lexicographic"
NUMERIC = "numeric"


@dataclass(frozen=True, slots=True)
class Misordering:
    """A record whose number did not exceed the one before it."""

    index: int
    previous: str
    current: str

    def to_dict(self) -> dict[str, object]:
        return {"index": self.index, "previous": self.previous, "current": self.current}


def _number_of(item: HeadingLike) -> str:
    return item.number if isinstance(item, TableHeading) else str(item)


def _numeric_key(number: str) -> tuple[int, ...] | None:
    segments = [segment for segment in number.split(".") if segment]
    # isdecimal, not isdigit: superscripts pass isdigit but int() rejects them.
    if not segments or not all(segment.isdecimal() for segment in segments):
        return None
    return tuple(int(segment) for segment in segments)


def is_increasing(previous: str, current: str, *, comparison: str = LEXICOGRAPHIC) -> bool:
    """Return whether ``current`` strictly exceeds ``previous``.

    ``lexicographic`` compares the raw strings, so ``"10"`` sorts before ``"9"``.
    ``numeric`` compares dot segments as integers and falls back to string
    comparison when either side has a non-digit segment.
    """

    if comparison == NUMERIC:
        previous_key = _numeric_key(previous)
        current_key = _numeric_key(current)
        if previous_key is not None and current_key is not None:
            return current_key > previous_key
    return current > previous


def find_misorderings(
    headings: Iterable[HeadingLike], *, comparison: str = LEXICOGRAPHIC
) -> list[Misordering]:
    """Return every position where the number fails to exceed its predecessor."""

    misorderings: list[Misordering] = []
    previous: str | None = None
    for index, item in enumerate(headings):
        current = _number_of(item)
        if previous is not None and not is_increasing(
            previous, current, comparison=comparison
        ):
            misorderings.append(Misordering(index=index, previous=previous, current=current))
        previous = current
    return misorderings


def flagged_numbers(
    misorderings: Iterable[Misordering], *, include_previous: bool = True
) -> list[str]:
    """Flatten misorderings into the reported list of numbers, in detection order."""

    flagged: list[str] = []
    for entry in misorderings:
        if include_previous:
            flagged.append(entry.previous)
        flagged.append(entry.current)
    return flagged


def find_misordered_numbers(
    headings: Iterable[HeadingLike],
    *,
    comparison: str = LEXICOGRAPHIC,
    include_previous: bool = True,
) -> list[str]:
    """Return the numbers of misordered tables, possibly with duplicates."""

    return flagged_numbers(
        find_misorderings(headings, comparison=comparison),
        include_previous=include_previous,
    )


__all__ = [
    "LEXICOGRAPHIC",
    "NUMERIC",
    "Misordering",
    "find_misordered_numbers",
    "find_misorderings",
    "flagged_numbers",
    "is_increasing",
]
