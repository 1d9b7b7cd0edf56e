"""
Root Typer application for the texdiag CLI.

Commands:
    texdiag parse build.log --root main.tex     publish and print diagnostics
    texdiag trim build.log                      show the LaTeX run that is parsed
"""

from __future__ import annotations

import typer
from typer import Typer

from texdiag.cli.utils import console, fail, output_json, output_table, read_log
from texdiag.core.errors import TexDiagError
from texdiag.core.logging import configure_logging, get_logger
from texdiag.core.settings import get_settings
from texdiag.models import Severity
from texdiag.parser.compiler import CompilerLogParser
from texdiag.state import BuildStateStore

logger = get_logger(__name__)

app = Typer(
    name="texdiag",
    help="texdiag - diagnostics from LaTeX, BibTeX and Biber build logs.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("texdiag")
        except PackageNotFoundError:
            v = "0.1.0"
        typer.echo(f"texdiag {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Override TEXDIAG_LOG_LEVEL."),
) -> None:
    """texdiag CLI - turn build logs into per-file diagnostics."""
    settings = get_settings()
    configure_logging(level=log_level or settings.log_level, json_format=settings.json_logs)


# ── texdiag parse ────────────────────────────────────────────────────────


@app.command("parse")
def parse_cmd(
    log_file: str = typer.Argument(..., help="Build log to parse, or '-' for stdin."),
    root: str | None = typer.Option(None, "--root", "-r", help="Root .tex file of the document."),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
    convert_encoding: bool | None = typer.Option(
        None,
        "--convert-encoding/--no-convert-encoding",
        help="Repair file names written in another encoding (default from settings).",
    ),
    use_state: bool = typer.Option(
        True,
        "--state/--no-state",
        help="Keep the last build's diagnostics to republish skipped latexmk runs.",
    ),
    strict: bool = typer.Option(False, "--strict", help="Exit non-zero on warnings too."),
) -> None:
    """Parse a build log and print the diagnostics it produces.

    Example:
        texdiag parse build/main.log --root main.tex
        latexmk -pdf main.tex 2>&1 | texdiag parse - --json
    """
    settings = get_settings()
    if convert_encoding is not None:
        settings = settings.model_copy(update={"convert_filename_encoding": convert_encoding})

    try:
        log = read_log(log_file)
        parser = CompilerLogParser.from_settings(settings)
        store = BuildStateStore(settings.state_file) if use_state else None
        if store is not None:
            store.restore_into(parser)

        skipped = parser.parse(log, root)

        if store is not None and not skipped:
            store.save_from(parser)
    except TexDiagError as exc:
        logger.error("parse_failed", **exc.to_dict())
        fail(exc)
        return

    if json_out:
        output_json(parser.collections, skipped=skipped)
    else:
        if skipped:
            console.print("[dim]latexmk: all targets up-to-date, showing the previous diagnostics.[/dim]")
        output_table(parser.collections)

    if parser.collections.total(Severity.ERROR):
        raise typer.Exit(code=1)
    if strict and parser.collections.total(Severity.WARNING):
        raise typer.Exit(code=1)


# ── texdiag trim ─────────────────────────────────────────────────────────


@app.command("trim")
def trim_cmd(
    log_file: str = typer.Argument(..., help="Build log, or '-' for stdin."),
) -> None:
    """Print the part of the log that belongs to the last LaTeX run."""
    try:
        log = read_log(log_file)
        parser = CompilerLogParser.from_settings(get_settings())
    except TexDiagError as exc:
        fail(exc)
        return
    typer.echo(parser.latex_segment(log))
