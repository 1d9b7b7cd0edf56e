"""
BibTeX log parser.

BibTeX reports problems in a handful of fixed shapes::

    Warning--empty journal in knuth84
    Warning--string name "jan" is undefined
    --line 12 of file refs.bib
    I was expecting a `,' or a `}'---line 20 of file refs.bib
     :       title = "The TeXbook"
     :
    I'm skipping whatever remains of this entry
    I found no \\bibstyle command---while reading file main.aux

Each shape is mapped to the file it blames: the ``.bib`` database, the
``.tex`` file owning an ``.aux``, or the root document.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from texdiag.core.cache import ContentCache, FileContentCache
from texdiag.core.logging import get_logger
from texdiag.models import EntryKind, LogEntry
from texdiag.parser.base import aux_to_tex, find_key_location, is_excluded, resolve_path

logger = get_logger(__name__)

MULTI_LINE_WARNING = re.compile(r"^Warning--(.+)\n--line (\d+) of file (.+)$", re.MULTILINE)
SINGLE_LINE_WARNING = re.compile(r"^Warning--(.+) in ([^\s]+)\s*$", re.MULTILINE)
SKIPPED_BLOCK_ERROR = re.compile(
    r"^(.*)\n?---line (\d+) of file (.*)\n(?: :.*\n)*I'm skipping whatever remains of this (entry|command)$",
    re.MULTILINE,
)
BAD_CROSS_REFERENCE = re.compile(
    r"^(A bad cross reference---entry \".+?\"\nrefers to entry.+?, which doesn't exist)$",
    re.MULTILINE,
)
ERROR_AUX_FILE = re.compile(r"^(.*)---while reading file (.*)$", re.MULTILINE)
ANY_WARNING = re.compile(r"^Warning--(.+)$", re.MULTILINE)

TOP_LEVEL_AUX = re.compile(r"^The top-level auxiliary file: (.+)$", re.MULTILINE)
DATABASE_FILE = re.compile(r"^Database file #\d+: (.+)$", re.MULTILINE)


class BibtexLogParser:
    """Extracts entries from BibTeX output.

    Parameters
    ----------
    cache
        Content of ``.bib`` files, used to find citation keys.
    exclude
        Compiled regexes; matching messages are dropped.
    """

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
        if root_file is None:
            aux = TOP_LEVEL_AUX.search(log)
            if aux:
                root_file = aux_to_tex(aux.group(1), None)
        bib_files = [resolve_path(m.group(1), root_file) for m in DATABASE_FILE.finditer(log)]

        found: list[tuple[int, LogEntry]] = []
        claimed: set[int] = set()

        def push(pos: int, kind: EntryKind, file: str | None, text: str, line: int) -> None:
            if not file:
                logger.debug("bibtex_entry_dropped", reason="no file", text=text)
                return
            if is_excluded(text, self.exclude):
                return
            found.append((pos, LogEntry(kind=kind, file=file, text=text, line=line)))

        for result in SINGLE_LINE_WARNING.finditer(log):
            claimed.add(result.start())
            location = find_key_location(result.group(2), bib_files, self.cache)
            if location:
                push(result.start(), EntryKind.WARNING, location[0], result.group(1), location[1])
            else:
                push(result.start(), EntryKind.WARNING, root_file, f"{result.group(1)} in {result.group(2)}", 1)

        for result in MULTI_LINE_WARNING.finditer(log):
            claimed.add(result.start())
            filename = resolve_path(result.group(3), root_file)
            push(result.start(), EntryKind.WARNING, filename, result.group(1), int(result.group(2)))

        for result in SKIPPED_BLOCK_ERROR.finditer(log):
            if result.group(4) == "entry":
                filename = resolve_path(result.group(3), root_file)
            else:
                filename = aux_to_tex(result.group(3), root_file)
            push(result.start(), EntryKind.ERROR, filename, result.group(1), int(result.group(2)))

        for result in BAD_CROSS_REFERENCE.finditer(log):
            push(result.start(), EntryKind.ERROR, root_file, result.group(1), 1)

        for result in ERROR_AUX_FILE.finditer(log):
            push(result.start(), EntryKind.ERROR, aux_to_tex(result.group(2), root_file), result.group(1), 1)

        for result in ANY_WARNING.finditer(log):
            if result.start() not in claimed:
                push(result.start(), EntryKind.WARNING, root_file, result.group(1).strip(), 1)

        found.sort(key=lambda item: item[0])
        self.build_log = [entry for _, entry in found]
        logger.debug("bibtex_log_parsed", entries=len(self.build_log), root_file=root_file)
        return self.build_log


__all__ = ["BibtexLogParser"]
