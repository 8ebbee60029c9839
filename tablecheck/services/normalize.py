from __future__ import annotations

NBSPS = "\u00A0\u2007\u2009"
SOFT_HYPH = "\u00AD"


def normalize_ocr_text(text: str, *, pipe_as_one: bool = True) -> str:
    """Apply fixed character fixes to raw OCR output before caption matching.

    Tesseract tends to read a lone ``1`` as ``|``; with ``pipe_as_one`` every
    pipe is mapped back. Line breaks are preserved.
    """

    text = text.replace(SOFT_HYPH, "")
    for ch in NBSPS:
        text = text.replace(ch, " ")
    if pipe_as_one:
        text = text.replace("|", "1")
    return text


__all__ = ["normalize_ocr_text"]
