"""
Tests for texdiag.parser.bibtex.

Covers:
- Single-line warnings located through the .bib database
- Multi-line warnings with an explicit file and line
- Skipped entry / command errors
- Bad cross references and .aux errors
- Generic warnings, root fallback and exclusion
"""

import re

import pytest

from texdiag.core.cache import InMemoryContentCache
from texdiag.models import EntryKind
from texdiag.parser.bibtex import BibtexLogParser

ROOT = "/work/thesis/main.tex"
BIB = "/work/thesis/refs.bib"

BIB_CONTENT = (
    "% references\n"
    "@book{knuth84,\n"
    "  title = {The TeXbook},\n"
    "}\n"
    "\n"
    "@article{lamport94,\n"
    "  title = {LaTeX},\n"
    "}\n"
)


@pytest.fixture
def bib_cache() -> InMemoryContentCache:
    cache = InMemoryContentCache()
    cache.set(BIB, BIB_CONTENT)
    return cache


def banner(*lines: str) -> str:
    return "\n".join(
        [
            "This is BibTeX, Version 0.99d (TeX Live 2024)",
            "The top-level auxiliary file: main.aux",
            "The style file: plain.bst",
            "Database file #1: refs.bib",
            *lines,
            "",
        ]
    )


class TestWarnings:
    """Warning shapes."""

    def test_single_line_warning_found_in_database(self, bib_cache):
        log = banner("Warning--empty journal in lamport94")
        (entry,) = BibtexLogParser(bib_cache).parse(log, ROOT)
        assert entry.kind == EntryKind.WARNING
        assert entry.file == BIB
        assert entry.line == 6
        assert entry.text == "empty journal"

    def test_single_line_warning_for_unknown_key(self, bib_cache):
        log = banner("Warning--empty journal in nobody")
        (entry,) = BibtexLogParser(bib_cache).parse(log, ROOT)
        assert entry.file == ROOT
        assert entry.line == 1
        assert entry.text == "empty journal in nobody"

    def test_multi_line_warning(self, bib_cache):
        log = banner('Warning--string name "jan" is undefined', "--line 12 of file refs.bib")
        (entry,) = BibtexLogParser(bib_cache).parse(log, ROOT)
        assert (entry.file, entry.line, entry.text) == (BIB, 12, 'string name "jan" is undefined')

    def test_generic_warning_goes_to_root(self, bib_cache):
        log = "This is BibTeX, Version 0.99\nWarning--empty bibliography\n"
        (entry,) = BibtexLogParser(bib_cache).parse(log, ROOT)
        assert (entry.kind, entry.file, entry.line, entry.text) == (
            EntryKind.WARNING,
            ROOT,
            1,
            "empty bibliography",
        )


class TestErrors:
    """Error shapes."""

    def test_skipped_entry(self, bib_cache):
        log = banner(
            "I was expecting a `,' or a `}'---line 20 of file refs.bib",
            " :       title = \"The TeXbook\"",
            " :       ",
            "I'm skipping whatever remains of this entry",
        )
        (entry,) = BibtexLogParser(bib_cache).parse(log, ROOT)
        assert entry.kind == EntryKind.ERROR
        assert (entry.file, entry.line) == (BIB, 20)
        assert entry.text == "I was expecting a `,' or a `}'"

    def test_skipped_command_blames_tex_file(self, bib_cache):
        log = banner(
            "Illegal, another \\bibdata command---line 5 of file main.aux",
            " : \\bibdata",
            " :         {refs}",
            "I'm skipping whatever remains of this command",
        )
        (entry,) = BibtexLogParser(bib_cache).parse(log, ROOT)
        assert (entry.file, entry.line) == (ROOT, 5)

    def test_bad_cross_reference(self, bib_cache):
        log = banner('A bad cross reference---entry "knuth84"', 'refers to entry "missing", which doesn\'t exist')
        (entry,) = BibtexLogParser(bib_cache).parse(log, ROOT)
        assert entry.kind == EntryKind.ERROR
        assert entry.file == ROOT
        assert entry.text.startswith('A bad cross reference---entry "knuth84"')

    def test_aux_file_error(self, bib_cache):
        log = banner("I found no \\bibstyle command---while reading file main.aux")
        (entry,) = BibtexLogParser(bib_cache).parse(log, ROOT)
        assert (entry.kind, entry.file, entry.line) == (EntryKind.ERROR, ROOT, 1)
        assert entry.text == "I found no \\bibstyle command"


class TestRootAndOrdering:
    """Root resolution, ordering and filters."""

    def test_root_from_top_level_aux(self, bib_cache):
        log = "This is BibTeX, Version 0.99\nThe top-level auxiliary file: /work/thesis/main.aux\nWarning--x\n"
        (entry,) = BibtexLogParser(bib_cache).parse(log)
        assert entry.file == ROOT

    def test_no_root_drops_root_entries(self, bib_cache):
        assert BibtexLogParser(bib_cache).parse("This is BibTeX, Version 0.99\nWarning--x\n") == []

    def test_entries_follow_log_order(self, bib_cache):
        log = banner(
            "Warning--empty journal in lamport94",
            "I found no \\bibstyle command---while reading file main.aux",
            "Warning--empty year in knuth84",
        )
        entries = BibtexLogParser(bib_cache).parse(log, ROOT)
        assert [e.text for e in entries] == ["empty journal", "I found no \\bibstyle command", "empty year"]
        assert [e.line for e in entries] == [6, 1, 2]

    def test_exclude(self, bib_cache):
        log = banner("Warning--empty journal in lamport94", "Warning--empty year in knuth84")
        parser = BibtexLogParser(bib_cache, exclude=[re.compile("journal")])
        assert [e.text for e in parser.parse(log, ROOT)] == ["empty year"]
