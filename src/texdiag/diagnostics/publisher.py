"""
Turn parsed log entries into published diagnostics.

Architecture:
    ::

        publish(collection, entries, source)
        │
        ├── per entry: full-line range, narrowed by error_position()
        ├── kind → severity (DIAGNOSTIC_SEVERITY)
        ├── group by file
        ├── per file: re-encode the name if it does not exist on disk
        │
        ▼
        collection.replace(grouped)      # full snapshot, never a merge

Every call is a snapshot: files reported by the previous call but absent
from ``entries`` are cleared from the collection.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Sequence

from texdiag.core.cache import ContentCache
from texdiag.core.logging import get_logger
from texdiag.core.settings import DEFAULT_FILENAME_ENCODINGS
from texdiag.diagnostics.collection import DiagnosticCollection
from texdiag.diagnostics.position import error_position
from texdiag.models import Diagnostic, EntryKind, LogEntry, Range, Severity
from texdiag.parser.encoding import convert_filename_encoding

logger = get_logger(__name__)

DIAGNOSTIC_SEVERITY: dict[EntryKind, Severity] = {
    EntryKind.TYPESETTING: Severity.INFORMATION,
    EntryKind.WARNING: Severity.WARNING,
    EntryKind.ERROR: Severity.ERROR,
}

# Column used as "end of line" when no precise range is known.
END_OF_LINE = 65535


class DiagnosticPublisher:
    """Builds diagnostics from log entries and writes them to a collection.

    Parameters
    ----------
    cache
        Source content used to narrow ranges.
    convert_encoding
        Try to repair file names that do not exist on disk.
    encodings
        Candidate encodings for the repair, in order.
    path_exists
        Existence check, ``os.path.exists`` by default.
    """

    def __init__(
        self,
        cache: ContentCache,
        *,
        convert_encoding: bool = True,
        encodings: Iterable[str] = DEFAULT_FILENAME_ENCODINGS,
        path_exists: Callable[[str], bool] = os.path.exists,
        convert_filename: Callable[..., str | None] = convert_filename_encoding,
    ) -> None:
        self.cache = cache
        self.convert_encoding = convert_encoding
        self.encodings = list(encodings)
        self._exists = path_exists
        self._convert = convert_filename

    def build(self, entry: LogEntry, source: str) -> Diagnostic:
        """Create the diagnostic for a single entry."""
        start_char, end_char = 0, END_OF_LINE
        span = error_position(entry, self.cache)
        if span is not None:
            start_char, end_char = span
        line = max(entry.line - 1, 0)
        return Diagnostic(
            range=Range.on_line(line, start_char, end_char),
            message=entry.text,
            severity=DIAGNOSTIC_SEVERITY[entry.kind],
            source=source,
        )

    def resolve_path(self, path: str) -> str:
        """Return the path to publish under."""
        if self.convert_encoding and not self._exists(path):
            converted = self._convert(path, self.encodings, self._exists)
            if converted is not None:
                return converted
        return path

    def publish(
        self,
        collection: DiagnosticCollection,
        entries: Sequence[LogEntry],
        source: str,
    ) -> None:
        """Replace the content of ``collection`` with diagnostics for ``entries``."""
        grouped: dict[str, list[Diagnostic]] = {}
        for entry in entries:
            grouped.setdefault(entry.file, []).append(self.build(entry, source))

        published: dict[str, list[Diagnostic]] = {}
        for path, diagnostics in grouped.items():
            # two printed spellings may repair to the same file
            published.setdefault(self.resolve_path(path), []).extend(diagnostics)

        collection.replace(published)
        logger.debug(
            "diagnostics_published",
            collection=collection.name,
            files=len(published),
            diagnostics=len(entries),
        )


__all__ = ["DIAGNOSTIC_SEVERITY", "END_OF_LINE", "DiagnosticPublisher"]
