"""
Biber log parser.

Biber prefixes every message with its level (``INFO``, ``WARN``,
``ERROR``); in a ``.blg`` file the level is itself preceded by a
``[123] Biber.pm:456>`` tag. Biber parses a UTF-8 copy of each data
source, so syntax errors name a temporary ``<name>_<pid>.utf8`` file that
has to be mapped back to the real ``.bib``.
"""

from __future__ import annotations

import os
import re
from collections.abc import Sequence

from texdiag.core.cache import ContentCache, FileContentCache
from texdiag.core.logging import get_logger
from texdiag.models import EntryKind, LogEntry
from texdiag.parser.base import find_key_location, is_excluded, resolve_path

logger = get_logger(__name__)

_PREFIX = r"^(?:\[\d+\] [^>\n]*> )?"

DATA_SOURCE = re.compile(_PREFIX + r"INFO - Found BibTeX data source '(.+)'$", re.MULTILINE)
SUBSYSTEM_MESSAGE = re.compile(_PREFIX + r"(WARN|ERROR) - BibTeX subsystem: (.+?), line (\d+), (.+)$", re.MULTILINE)
DATAMODEL_WARNING = re.compile(_PREFIX + r"WARN - Datamodel: Entry '(.+?)' \((.+?)\): (.+)$", re.MULTILINE)
MISSING_ENTRY = re.compile(_PREFIX + r"WARN - I didn't find a database entry for '(.+?)'.*$", re.MULTILINE)
ANY_MESSAGE = re.compile(_PREFIX + r"(WARN|ERROR) - (.+)$", re.MULTILINE)

UTF8_COPY_SUFFIX = re.compile(r"_\d+\.utf8$")

_KIND = {"WARN": EntryKind.WARNING, "ERROR": EntryKind.ERROR}


class BiberLogParser:
    """Extracts entries from Biber output."""

    def __init__(
        self,
        cache: ContentCache | None = None,
        *,
        exclude: Sequence[re.Pattern[str]] = (),
    ) -> None:
        self.cache = cache if cache is not None else FileContentCache()
        self.exclude = list(exclude)
        self.build_log: list[LogEntry] = []

    def parse(self, log: str, root_file: str | None = None) -> list[LogEntry]:
        bib_files = [resolve_path(m.group(1), root_file) for m in DATA_SOURCE.finditer(log)]

        found: list[tuple[int, LogEntry]] = []
        claimed: set[int] = set()

        def push(
            pos: int,
            kind: EntryKind,
            file: str | None,
            text: str,
            line: int,
            error_pos_text: str | None = None,
        ) -> None:
            claimed.add(pos)
            if not file:
                logger.debug("biber_entry_dropped", reason="no file", text=text)
                return
            if is_excluded(text, self.exclude):
                return
            found.append((pos, LogEntry(kind, file, text, line, error_pos_text)))

        for result in SUBSYSTEM_MESSAGE.finditer(log):
            filename = self._data_source(result.group(2), bib_files) or root_file
            push(result.start(), _KIND[result.group(1)], filename, result.group(4), int(result.group(3)))

        for result in DATAMODEL_WARNING.finditer(log):
            key, bib, text = result.groups()
            candidates = [f for f in bib_files if os.path.basename(f) == os.path.basename(bib)]
            location = find_key_location(key, candidates or bib_files, self.cache)
            if location:
                push(result.start(), EntryKind.WARNING, location[0], text, location[1], key)
            else:
                push(result.start(), EntryKind.WARNING, self._data_source(bib, bib_files), text, 1)

        for result in MISSING_ENTRY.finditer(log):
            key = result.group(1)
            text = f"I didn't find a database entry for '{key}'"
            line = self._citation_line(key, root_file)
            push(result.start(), EntryKind.WARNING, root_file, text, line or 1, key if line else None)

        for result in ANY_MESSAGE.finditer(log):
            if result.start() not in claimed:
                push(result.start(), _KIND[result.group(1)], root_file, result.group(2), 1)

        found.sort(key=lambda item: item[0])
        self.build_log = [entry for _, entry in found]
        logger.debug("biber_log_parsed", entries=len(self.build_log), data_sources=len(bib_files))
        return self.build_log

    @staticmethod
    def _data_source(name: str, bib_files: list[str]) -> str | None:
        """Map a file name printed by Biber to one of the data sources."""
        base = UTF8_COPY_SUFFIX.sub("", os.path.basename(name.strip()))
        for bib_file in bib_files:
            if os.path.basename(bib_file) == base:
                return bib_file
        return bib_files[0] if bib_files else None

    def _citation_line(self, key: str, root_file: str | None) -> int | None:
        if not root_file:
            return None
        content = self.cache.get(root_file)
        if not content:
            return None
        for number, line in enumerate(content.split("\n"), start=1):
            if "cite" in line and key in line:
                return number
        return None


__all__ = ["BiberLogParser"]
