"""
texdiag - diagnostics from LaTeX build logs.

Turns the raw output of latexmk, texify, pdfLaTeX/XeLaTeX/LuaLaTeX, BibTeX
and Biber into per-file diagnostics (severity, line, message, column range)
held in one collection per tool family.

Example::

    from texdiag import CompilerLogParser, get_settings
    from texdiag.core.logging import configure_logging

    configure_logging(level="WARNING")
    parser = CompilerLogParser.from_settings(get_settings())
    skipped = parser.parse(open("build.log").read(), "main.tex")
    for path, diagnostics in parser.collections.latex.items():
        print(path, diagnostics)
"""

from texdiag.core.settings import TexDiagSettings, get_settings
from texdiag.diagnostics.collection import DiagnosticCollection, DiagnosticCollections
from texdiag.diagnostics.publisher import DiagnosticPublisher
from texdiag.models import Diagnostic, EntryKind, LogEntry, Position, Range, Severity
from texdiag.parser.compiler import CompilerLogParser

__version__ = "0.1.0"

__all__ = [
    "CompilerLogParser",
    "Diagnostic",
    "DiagnosticCollection",
    "DiagnosticCollections",
    "DiagnosticPublisher",
    "EntryKind",
    "LogEntry",
    "Position",
    "Range",
    "Severity",
    "TexDiagSettings",
    "get_settings",
]
