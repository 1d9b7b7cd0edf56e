"""
Last-build state for skip republication across processes.

When latexmk finds every target up-to-date it prints no diagnostics at all,
so the previous batches have to be republished. Inside one process they
live on each parser's ``build_log``; the CLI runs once per build, so the
batches are persisted between runs in ``<data_dir>/last_build.json``::

    {
      "version": 1,
      "saved_at": "2026-10-18T09:12:44+00:00",
      "latex":  [{"kind": "warning", "file": "...", "text": "...", "line": 3}],
      "bibtex": [],
      "biber":  []
    }
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from texdiag.core.errors import StateError
from texdiag.core.logging import get_logger
from texdiag.models import LogEntry
from texdiag.parser.compiler import CompilerLogParser

logger = get_logger(__name__)

STATE_VERSION = 1
TOOLS = ("latex", "bibtex", "biber")


class BuildStateStore:
    """Reads and writes the last build's entries."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> dict[str, list[LogEntry]]:
        """Return the stored batches; missing or corrupt state yields empty batches."""
        empty: dict[str, list[LogEntry]] = {tool: [] for tool in TOOLS}
        if not self.path.exists():
            return empty
        try:
            data: dict[str, Any] = json.loads(self.path.read_text(encoding="utf-8"))
            if data.get("version") != STATE_VERSION:
                logger.warning("build_state_version_mismatch", path=str(self.path), version=data.get("version"))
                return empty
            return {tool: [LogEntry.from_dict(item) for item in data.get(tool, [])] for tool in TOOLS}
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("build_state_unreadable", path=str(self.path), error=str(exc))
            return empty

    def save(self, batches: dict[str, list[LogEntry]]) -> None:
        payload: dict[str, Any] = {
            "version": STATE_VERSION,
            "saved_at": datetime.now(UTC).isoformat(),
        }
        for tool in TOOLS:
            payload[tool] = [entry.to_dict() for entry in batches.get(tool, [])]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StateError("Cannot write build state", cause=exc).with_context(path=str(self.path)) from exc
        logger.debug("build_state_saved", path=str(self.path))

    def restore_into(self, parser: CompilerLogParser) -> None:
        """Put the stored batches on the parsers' ``build_log``."""
        batches = self.load()
        parser.latex.build_log = batches["latex"]
        parser.bibtex.build_log = batches["bibtex"]
        parser.biber.build_log = batches["biber"]

    def save_from(self, parser: CompilerLogParser) -> None:
        self.save(
            {
                "latex": parser.latex.build_log,
                "bibtex": parser.bibtex.build_log,
                "biber": parser.biber.build_log,
            }
        )


__all__ = ["BuildStateStore", "STATE_VERSION"]
