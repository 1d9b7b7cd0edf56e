"""
Tests for texdiag.core.cache module.

Covers:
- InMemoryContentCache: get/set/delete/exists/clear, LRU eviction, path normalisation
- FileContentCache: read-through, mtime invalidation, overrides, unreadable files
"""

import os

from texdiag.core.cache import FileContentCache, InMemoryContentCache


class TestInMemoryContentCache:
    """Test InMemoryContentCache."""

    def test_basic_get_set(self):
        """Cache should store and retrieve content."""
        cache = InMemoryContentCache()
        cache.set("/doc/main.tex", "hello")
        assert cache.get("/doc/main.tex") == "hello"

    def test_get_missing(self):
        assert InMemoryContentCache().get("/missing.tex") is None

    def test_delete_and_exists(self):
        cache = InMemoryContentCache()
        cache.set("/a.tex", "x")
        assert cache.exists("/a.tex")
        cache.delete("/a.tex")
        assert not cache.exists("/a.tex")
        cache.delete("/a.tex")

    def test_paths_are_normalised(self):
        """Equivalent spellings of a path share one entry."""
        cache = InMemoryContentCache()
        cache.set("/doc/./chapters/../main.tex", "x")
        assert cache.get("/doc/main.tex") == "x"
        assert cache.size() == 1

    def test_lru_eviction(self):
        """Oldest untouched entry is evicted when full."""
        cache = InMemoryContentCache(max_size=2)
        cache.set("/a", "1")
        cache.set("/b", "2")
        cache.get("/a")
        cache.set("/c", "3")
        assert cache.exists("/a")
        assert not cache.exists("/b")
        assert cache.size() == 2

    def test_overwrite_does_not_evict(self):
        cache = InMemoryContentCache(max_size=2)
        cache.set("/a", "1")
        cache.set("/b", "2")
        cache.set("/a", "changed")
        assert cache.size() == 2
        assert cache.get("/b") == "2"

    def test_clear(self):
        cache = InMemoryContentCache()
        cache.set("/a", "1")
        cache.set("/b", "2")
        cache.clear()
        assert cache.size() == 0


class TestFileContentCache:
    """Test FileContentCache."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "main.tex"
        path.write_text("\\documentclass{article}\n", encoding="utf-8")
        cache = FileContentCache()
        assert cache.get(str(path)) == "\\documentclass{article}\n"
        assert cache.size() == 1

    def test_missing_file_returns_none(self, tmp_path):
        assert FileContentCache().get(str(tmp_path / "nope.tex")) is None

    def test_directory_returns_none(self, tmp_path):
        assert FileContentCache().get(str(tmp_path)) is None

    def test_rereads_on_mtime_change(self, tmp_path):
        """A modified file is read again."""
        path = tmp_path / "main.tex"
        path.write_text("old", encoding="utf-8")
        cache = FileContentCache()
        assert cache.get(str(path)) == "old"

        path.write_text("new", encoding="utf-8")
        stat = path.stat()
        os.utime(path, (stat.st_atime, stat.st_mtime + 10))
        assert cache.get(str(path)) == "new"

    def test_overrides_win(self, tmp_path):
        """Unsaved buffers take precedence over disk content."""
        path = tmp_path / "main.tex"
        path.write_text("on disk", encoding="utf-8")
        overrides = InMemoryContentCache()
        overrides.set(str(path), "in editor")
        cache = FileContentCache(overrides=overrides)
        assert cache.get(str(path)) == "in editor"

    def test_undecodable_bytes_are_replaced(self, tmp_path):
        path = tmp_path / "latin1.bib"
        path.write_bytes(b"caf\xe9")
        assert FileContentCache().get(str(path)) == "caf\ufffd"

    def test_invalidate_and_clear(self, tmp_path):
        path = tmp_path / "main.tex"
        path.write_text("x", encoding="utf-8")
        cache = FileContentCache()
        cache.get(str(path))
        cache.invalidate(str(path))
        assert cache.size() == 0

        cache.get(str(path))
        cache.overrides.set("/other.tex", "y")
        cache.clear()
        assert cache.size() == 0
        assert cache.overrides.size() == 0

    def test_eviction(self, tmp_path):
        cache = FileContentCache(max_size=1)
        for name in ("a.tex", "b.tex"):
            (tmp_path / name).write_text(name, encoding="utf-8")
            cache.get(str(tmp_path / name))
        assert cache.size() == 1
