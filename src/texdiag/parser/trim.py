"""
Isolate the part of a build log that belongs to the last relevant run.

latexmk and texify re-run the LaTeX engine until cross-references settle.
Each run repeats the warnings of the previous one, and only the final run
describes the state of the document, so the log is cut down to the window
opened by the last begin marker.
"""

from __future__ import annotations

import re

from texdiag.core.logging import get_logger
from texdiag.parser import patterns

logger = get_logger(__name__)


def trim_pattern(log: str, begin: re.Pattern[str], end: re.Pattern[str]) -> str:
    """Return the lines between the last occurrences of ``begin`` and ``end``.

    Both markers are tracked independently over every line, so a single line
    may count as both. If ``end`` is not found after the last ``begin``, the
    lines from the last ``begin`` up to the end of the log are returned. If
    ``begin`` never matches, the whole log is returned.
    """
    lines = log.split("\n")
    start_line = -1
    final_line = -1
    for index, line in enumerate(lines):
        if begin.search(line):
            start_line = index
        if end.search(line):
            final_line = index

    logger.debug("log_trimmed", start=start_line, end=final_line, total=len(lines))
    if start_line < 0:
        return log
    if final_line <= start_line:
        return "\n".join(lines[start_line:])
    return "\n".join(lines[start_line:final_line])


def trim_latexmk(log: str) -> str:
    """Keep the last LaTeX run from a latexmk log."""
    return trim_pattern(log, patterns.LATEXMK_RULE_LATEX, patterns.LATEXMK_RULE)


def trim_latexmk_bibtex(log: str) -> str:
    """Keep the last BibTeX run from a latexmk log."""
    return trim_pattern(log, patterns.BIBTEX_BANNER, patterns.LATEXMK_RULE_LATEX)


def trim_latexmk_biber(log: str) -> str:
    """Keep the last Biber run from a latexmk log."""
    return trim_pattern(log, patterns.BIBER_BANNER, patterns.LATEXMK_RULE_LATEX)


def trim_texify(log: str) -> str:
    """Keep the last LaTeX run from a texify log."""
    return trim_pattern(log, patterns.TEXIFY_RUN_LATEX, patterns.TEXIFY_LOG)


__all__ = [
    "trim_pattern",
    "trim_latexmk",
    "trim_latexmk_bibtex",
    "trim_latexmk_biber",
    "trim_texify",
]
