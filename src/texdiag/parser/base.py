"""
Contract and helpers shared by the tool-specific log parsers.

A ``LogParser`` turns an already isolated log segment into ``LogEntry``
objects and keeps the last batch on ``build_log`` so the dispatcher can
republish it when latexmk skips a build.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Sequence
from typing import Protocol

from texdiag.core.cache import ContentCache
from texdiag.models import LogEntry


class LogParser(Protocol):
    """Protocol implemented by the LaTeX, BibTeX and Biber parsers."""

    build_log: list[LogEntry]

    def parse(self, log: str, root_file: str | None = None) -> list[LogEntry]:
        """Extract entries from ``log`` and store them on ``build_log``."""
        ...


def resolve_path(path: str, root_file: str | None) -> str:
    """Resolve ``path`` against the directory of ``root_file``."""
    path = path.strip().strip('"')
    if os.path.isabs(path) or not root_file:
        return os.path.normpath(path) if path else path
    return os.path.normpath(os.path.join(os.path.dirname(root_file), path))


def aux_to_tex(path: str, root_file: str | None) -> str:
    """Map an ``.aux`` file printed by BibTeX to the ``.tex`` it belongs to."""
    path = path.strip()
    if path.endswith(".aux"):
        path = path[: -len(".aux")] + ".tex"
    return resolve_path(path, root_file)


def is_excluded(text: str, exclude: Sequence[re.Pattern[str]]) -> bool:
    return any(pattern.search(text) for pattern in exclude)


def find_key_location(
    key: str, bib_files: Iterable[str], cache: ContentCache
) -> tuple[str, int] | None:
    """Find the file and 1-based line where ``@type{key,`` is defined."""
    entry = re.compile(r"@\w+\s*[{(]\s*" + re.escape(key) + r"\s*,")
    for bib_file in bib_files:
        content = cache.get(bib_file)
        if not content:
            continue
        match = entry.search(content)
        if match:
            return bib_file, content.count("\n", 0, match.start()) + 1
    return None


__all__ = [
    "LogParser",
    "resolve_path",
    "aux_to_tex",
    "is_excluded",
    "find_key_location",
]
