"""
Data model shared by the parsers, the position refiner and the publisher.

``LogEntry`` is what a tool-specific parser extracts from an isolated log
segment. ``Diagnostic`` is what the publisher stores in a collection after
the entry's column range has been refined and its kind mapped to a
severity.

Architecture:
    ::

        LogEntry (kind, file, text, line, error_pos_text)
            │  error_position()  → ColumnSpan | None
            ▼
        Diagnostic (range, message, severity, source)
            │  grouped by file
            ▼
        DiagnosticCollection.set(file, [Diagnostic, ...])

Tags:
    models, diagnostics, log-entry, texdiag
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class EntryKind(str, Enum):
    """Kind of a parsed log entry, as reported by the tool."""

    TYPESETTING = "typesetting"
    WARNING = "warning"
    ERROR = "error"


class Severity(str, Enum):
    """Severity of a published diagnostic."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


@dataclass(frozen=True)
class LogEntry:
    """A single diagnostic extracted from a build log.

    Attributes:
        kind: ``typesetting``, ``warning`` or ``error``.
        file: Path of the source file the tool blamed.
        text: Message as printed by the tool.
        line: 1-based line number in ``file``.
        error_pos_text: Literal fragment the tool quoted as the error site.
    """

    kind: EntryKind
    file: str
    text: str
    line: int
    error_pos_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "kind": self.kind.value,
            "file": self.file,
            "text": self.text,
            "line": self.line,
        }
        if self.error_pos_text is not None:
            result["error_pos_text"] = self.error_pos_text
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogEntry:
        return cls(
            kind=EntryKind(data["kind"]),
            file=str(data["file"]),
            text=str(data["text"]),
            line=int(data["line"]),
            error_pos_text=data.get("error_pos_text"),
        )


@dataclass(frozen=True)
class Position:
    """Zero-based line/character position."""

    line: int
    character: int


@dataclass(frozen=True)
class Range:
    """Half-open range between two positions."""

    start: Position
    end: Position

    @classmethod
    def on_line(cls, line: int, start: int, end: int) -> Range:
        return cls(Position(line, start), Position(line, end))


@dataclass(frozen=True)
class Diagnostic:
    """A published diagnostic."""

    range: Range
    message: str
    severity: Severity
    source: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.range.start.line,
            "start": self.range.start.character,
            "end": self.range.end.character,
            "message": self.message,
            "severity": self.severity.value,
            "source": self.source,
        }


__all__ = [
    "EntryKind",
    "Severity",
    "LogEntry",
    "Position",
    "Range",
    "Diagnostic",
]
