"""
Shared pytest fixtures and configuration for texdiag tests.

This module provides:
- Settings cache and structlog isolation between tests
- An in-memory source cache and a root document on disk
- A dispatcher factory wired with in-memory collaborators

Usage:
    Fixtures are auto-discovered by pytest:

    def test_something(make_parser, root_file):
        parser = make_parser()
        parser.parse(log, str(root_file))
"""

import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog

# Ensure texdiag package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from texdiag.core.cache import InMemoryContentCache
from texdiag.core.logging import clear_context
from texdiag.core.settings import clear_settings_cache
from texdiag.diagnostics.collection import DiagnosticCollections
from texdiag.diagnostics.publisher import DiagnosticPublisher
from texdiag.parser.biber import BiberLogParser
from texdiag.parser.bibtex import BibtexLogParser
from texdiag.parser.compiler import CompilerLogParser
from texdiag.parser.latex import LatexLogParser


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolate_settings_and_logging(monkeypatch, tmp_path) -> Generator[None, None, None]:
    """Fresh settings per test, state kept under tmp_path, default structlog config."""
    monkeypatch.setenv("TEXDIAG_DATA_DIR", str(tmp_path / "state"))
    clear_settings_cache()
    yield
    clear_settings_cache()
    clear_context()
    structlog.reset_defaults()


# =============================================================================
# Source Fixtures
# =============================================================================


@pytest.fixture
def memory_cache() -> InMemoryContentCache:
    return InMemoryContentCache(max_size=32)


@pytest.fixture
def root_file(tmp_path: Path) -> Path:
    """A root document that exists on disk."""
    path = tmp_path / "main.tex"
    path.write_text(
        "\\documentclass{article}\n"
        "\\begin{document}\n"
        "See \\cite{knuth84}.\n"
        "\\end{document}\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def make_parser(memory_cache) -> Callable[..., CompilerLogParser]:
    """Factory for a dispatcher over ``memory_cache`` with no encoding repair."""

    def _make(**publisher_kwargs) -> CompilerLogParser:
        publisher_kwargs.setdefault("convert_encoding", False)
        return CompilerLogParser(
            latex=LatexLogParser(),
            bibtex=BibtexLogParser(memory_cache),
            biber=BiberLogParser(memory_cache),
            publisher=DiagnosticPublisher(memory_cache, **publisher_kwargs),
            collections=DiagnosticCollections(),
        )

    return _make
