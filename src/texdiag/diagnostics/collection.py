"""
Diagnostic collections, one per tool family.

A collection maps a file path to the ordered diagnostics published for it.
The publisher owns writes and always replaces the whole mapping, so a file
that disappears from a build's output is cleared implicitly.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from texdiag.models import Diagnostic, Severity


class DiagnosticCollection:
    """Named mapping of file path → diagnostics.

    Example:
        collection = DiagnosticCollection("LaTeX")
        collection.set("/doc/main.tex", [diag])
        collection.get("/doc/main.tex")
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[str, list[Diagnostic]] = {}

    def set(self, path: str, diagnostics: Sequence[Diagnostic]) -> None:
        """Set the diagnostics of one file, replacing what it had."""
        self._entries[path] = list(diagnostics)

    def get(self, path: str) -> list[Diagnostic]:
        return list(self._entries.get(path, []))

    def replace(self, entries: Mapping[str, Sequence[Diagnostic]]) -> None:
        """Swap the whole content for ``entries`` in one step."""
        self._entries = {path: list(diags) for path, diags in entries.items()}

    def clear(self) -> None:
        self._entries = {}

    def files(self) -> list[str]:
        return list(self._entries)

    def items(self) -> Iterator[tuple[str, list[Diagnostic]]]:
        for path, diags in self._entries.items():
            yield path, list(diags)

    def count(self, severity: Severity | None = None) -> int:
        """Number of diagnostics, optionally of one severity only."""
        return sum(
            1
            for diags in self._entries.values()
            for d in diags
            if severity is None or d.severity == severity
        )

    def snapshot(self) -> dict[str, list[Diagnostic]]:
        """Copy of the current mapping."""
        return {path: list(diags) for path, diags in self._entries.items()}

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"DiagnosticCollection({self.name!r}, files={len(self._entries)})"


@dataclass
class DiagnosticCollections:
    """The three collections written by the log dispatcher."""

    latex: DiagnosticCollection = field(default_factory=lambda: DiagnosticCollection("LaTeX"))
    bibtex: DiagnosticCollection = field(default_factory=lambda: DiagnosticCollection("BibTeX"))
    biber: DiagnosticCollection = field(default_factory=lambda: DiagnosticCollection("Biber"))

    def __iter__(self) -> Iterator[DiagnosticCollection]:
        return iter((self.latex, self.bibtex, self.biber))

    def total(self, severity: Severity | None = None) -> int:
        return sum(c.count(severity) for c in self)


__all__ = ["DiagnosticCollection", "DiagnosticCollections"]
