"""Diagnostic collections, position refinement and publishing."""

from texdiag.diagnostics.collection import DiagnosticCollection, DiagnosticCollections
from texdiag.diagnostics.position import ColumnSpan, error_position
from texdiag.diagnostics.publisher import DIAGNOSTIC_SEVERITY, END_OF_LINE, DiagnosticPublisher

__all__ = [
    "DiagnosticCollection",
    "DiagnosticCollections",
    "ColumnSpan",
    "error_position",
    "DIAGNOSTIC_SEVERITY",
    "END_OF_LINE",
    "DiagnosticPublisher",
]
