"""
CLI utility helpers - log input and output formatting.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from texdiag.core.errors import LogReadError, TexDiagError
from texdiag.diagnostics.collection import DiagnosticCollections
from texdiag.diagnostics.publisher import END_OF_LINE
from texdiag.models import Severity

console = Console()
err_console = Console(stderr=True)

_SEVERITY_STYLE = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFORMATION: "cyan",
    Severity.HINT: "dim",
}


# ── Input ────────────────────────────────────────────────────────────────


def read_log(log_file: str) -> str:
    """Read a build log; ``-`` reads standard input."""
    if log_file == "-":
        return sys.stdin.read()
    path = Path(log_file)
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise LogReadError(f"Cannot read log file: {exc.strerror or exc}", cause=exc).with_context(
            path=str(path)
        ) from exc


def fail(error: TexDiagError) -> None:
    """Print ``error`` and exit with status 2."""
    err_console.print(f"[bold red]Error[/bold red] ({error.category.value}): {escape(error.message)}")
    raise typer.Exit(code=2)


# ── Output helpers ───────────────────────────────────────────────────────


def collections_to_dict(collections: DiagnosticCollections) -> dict[str, Any]:
    return {
        collection.name: {path: [d.to_dict() for d in diags] for path, diags in collection.items()}
        for collection in collections
    }


def output_json(collections: DiagnosticCollections, *, skipped: bool) -> None:
    payload = {"skipped": skipped, "collections": collections_to_dict(collections)}
    console.print_json(json.dumps(payload))


def output_table(collections: DiagnosticCollections) -> None:
    """Render every published diagnostic as a Rich table."""
    if collections.total() == 0:
        console.print("[dim]No diagnostics.[/dim]")
        return

    table = Table(show_lines=False, pad_edge=False)
    table.add_column("Source")
    table.add_column("File", overflow="fold")
    table.add_column("Line", justify="right")
    table.add_column("Columns")
    table.add_column("Severity")
    table.add_column("Message", overflow="fold")
    for collection in collections:
        for path, diagnostics in collection.items():
            for d in diagnostics:
                start, end = d.range.start.character, d.range.end.character
                columns = f"{start}-{end}" if (start, end) != (0, END_OF_LINE) else ""
                style = _SEVERITY_STYLE[d.severity]
                table.add_row(
                    d.source,
                    escape(path),
                    str(d.range.start.line + 1),
                    columns,
                    f"[{style}]{d.severity.value}[/{style}]",
                    escape(d.message),
                )
    console.print(table)
