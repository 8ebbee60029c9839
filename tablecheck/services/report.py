"""Plain-text rendering of a table numbering check."""

from __future__ import annotations

from .pipeline import TableCheckResult

SEPARATOR = "----"


def render_report(result: TableCheckResult) -> str:
    """Return the console report for *result*.

    Every caption is listed with its number and title; the misnumbered
    tables follow on one line when there are any.
    """

    lines: list[str] = []
    for heading in result.headings:
        lines.append(f"Table number: {heading.number}")
        lines.append(f"Table title: {heading.title}")
        lines.append(SEPARATOR)

    if result.flagged:
        lines.append("")
        lines.append("Misnumbered tables: " + " ".join(result.flagged))

    if not result.headings:
        lines.extend(result.messages)

    return "\n".join(lines)


__all__ = ["render_report"]
