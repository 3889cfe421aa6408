"""Wrap spans of a string in numbered `<eN>...</eN>` markers."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

from icucheck.messages import Location

MARKER_RE = re.compile(r"</?e\d+>")

Span = Tuple[int, int]


def _clamp(text: str, span: Optional[Span]) -> Span:
    if span is None:
        return 0, len(text)
    start, end = span
    if start < 0 or end > len(text) or start > end:
        return 0, len(text)
    return start, end


def as_span(location: Optional[Location]) -> Optional[Span]:
    if location is None:
        return None
    return location.start, location.end


def highlight(text: str, span: Optional[Span] = None, index: int = 0) -> str:
    """Mark a single span; with no span the whole string is marked."""
    start, end = _clamp(text, span)
    return f"{text[:start]}<e{index}>{text[start:end]}</e{index}>{text[end:]}"


def highlight_spans(text: str, spans: Iterable[Optional[Span]]) -> str:
    """Mark several spans with sequential markers in order of position.

    Spans overlapping an earlier span are dropped so the markers stay nested
    correctly.
    """
    ordered = sorted({_clamp(text, span) for span in spans})
    if not ordered:
        return highlight_end(text)
    pieces: List[str] = []
    cursor = 0
    index = 0
    for start, end in ordered:
        if start < cursor:
            continue
        pieces.append(text[cursor:start])
        pieces.append(f"<e{index}>{text[start:end]}</e{index}>")
        cursor = end
        index += 1
    pieces.append(text[cursor:])
    return "".join(pieces)


def highlight_end(text: str) -> str:
    """Anchor a problem at the end of the string with an empty marker."""
    return f"{text}<e0></e0>"


def strip_markers(text: str) -> str:
    return MARKER_RE.sub("", text)


__all__ = ["as_span", "highlight", "highlight_end", "highlight_spans", "strip_markers"]
