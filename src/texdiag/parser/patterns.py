"""
Recognisers for the tools that write into a build log.

Every pattern is anchored to the start of a line and compiled with
``re.MULTILINE``, so the same object answers both "does the whole log
contain this marker?" (:func:`contains`) and "does this single line carry
the marker?" (``pattern.search(line)``). Compiled patterns hold no scan
state between calls.

Note that ``Output written on ...`` is not printed in draft mode, so the
fatal-error marker is the only other signal that the LaTeX engine ran.
"""

from __future__ import annotations

import re

# LaTeX engine
LATEX_OUTPUT = re.compile(r"^Output\swritten\son\s(.*)\s\(.*\)\.$", re.MULTILINE)
LATEX_FATAL = re.compile(r"Fatal error occurred, no output PDF file produced!", re.MULTILINE)

# latexmk
LATEXMK_RULE = re.compile(r"^Latexmk:\sapplying\srule", re.MULTILINE)
LATEXMK_RULE_LATEX = re.compile(r"^Latexmk:\sapplying\srule\s'(pdf|lua|xe)?latex'", re.MULTILINE)
LATEXMK_UP_TO_DATE = re.compile(r"^Latexmk: All targets \(.*\) are up-to-date", re.MULTILINE)

# texify (MiKTeX)
TEXIFY_RUN = re.compile(r"^running\s(pdf|lua|xe)?latex", re.MULTILINE)
TEXIFY_RUN_LATEX = TEXIFY_RUN
TEXIFY_LOG = re.compile(r"^running\s((pdf|lua|xe)?latex|miktex-bibtex)", re.MULTILINE)

# Bibliography engines
BIBTEX_BANNER = re.compile(r"^This is BibTeX, Version.*$", re.MULTILINE)
BIBER_BANNER = re.compile(r"^INFO - This is Biber .*$", re.MULTILINE)


def contains(pattern: re.Pattern[str], log: str) -> bool:
    """True if ``pattern`` matches anywhere in ``log``."""
    return pattern.search(log) is not None


__all__ = [
    "LATEX_OUTPUT",
    "LATEX_FATAL",
    "LATEXMK_RULE",
    "LATEXMK_RULE_LATEX",
    "LATEXMK_UP_TO_DATE",
    "TEXIFY_RUN",
    "TEXIFY_RUN_LATEX",
    "TEXIFY_LOG",
    "BIBTEX_BANNER",
    "BIBER_BANNER",
    "contains",
]
