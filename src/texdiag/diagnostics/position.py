"""Narrow a diagnostic to the token the tool quoted as the error site."""

from __future__ import annotations

from typing import NamedTuple

from texdiag.core.cache import ContentCache
from texdiag.models import LogEntry


class ColumnSpan(NamedTuple):
    """Zero-based, half-open column range on one line."""

    start: int
    end: int


def error_position(entry: LogEntry, cache: ContentCache) -> ColumnSpan | None:
    """Locate ``entry.error_pos_text`` in the current source line.

    TeX quotes the context up to the offending token, so only the last
    space-separated word of the quote is highlighted. Returns ``None`` when
    the entry has no quote, the file content is unavailable, the line is out
    of range or the quote no longer appears on it.
    """
    anchor = entry.error_pos_text
    if not anchor:
        return None
    content = cache.get(entry.file)
    if not content:
        return None

    lines = content.split("\n")
    if entry.line < 1 or len(lines) < entry.line:
        return None

    pos = lines[entry.line - 1].find(anchor)
    if pos < 0:
        return None
    end = pos + len(anchor)
    # length of the last word of the quote
    length = len(anchor) - anchor.rfind(" ") - 1
    if length > 0:
        return ColumnSpan(end - length, end)
    return None


__all__ = ["ColumnSpan", "error_position"]
