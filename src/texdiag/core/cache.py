"""
Source content caches.

The position refiner and the bibliography parsers need the *current* text of
source files (``.tex`` and ``.bib``) to locate a diagnostic's anchor or a
citation key. They only ever read, through the ``ContentCache`` protocol.

Architecture:
    ::

        ContentCache (Protocol)          get(path) → str | None
        ├── InMemoryContentCache         bounded LRU, fed by the caller
        │                                (editor buffers, tests)
        └── FileContentCache             read-through over the filesystem,
                                         re-reads on mtime change, consults
                                         an optional InMemoryContentCache
                                         of overrides first

Examples:
    >>> from texdiag.core.cache import InMemoryContentCache
    >>> cache = InMemoryContentCache(max_size=10)
    >>> cache.set("/doc/main.tex", "\\\\documentclass{article}")
    >>> cache.exists("/doc/main.tex")
    True

Guardrails:
    - Lookups never raise: an unreadable file is reported as ``None``
    - Paths are normalised with ``os.path.normpath`` so ``a/./b.tex`` and
      ``a/b.tex`` share one entry

Tags:
    cache, lru, source-content, texdiag
"""

from __future__ import annotations

import os
from collections import OrderedDict
from pathlib import Path
from typing import Protocol

from texdiag.core.logging import get_logger

logger = get_logger(__name__)


def _key(path: str | Path) -> str:
    return os.path.normpath(str(path))


class ContentCache(Protocol):
    """Protocol for read-only access to source file content."""

    def get(self, path: str) -> str | None:
        """Return the content of ``path``, or ``None`` when it is unavailable."""
        ...


class InMemoryContentCache:
    """Bounded in-memory content cache with LRU eviction.

    Attributes:
        max_size: Maximum number of files before LRU eviction.
    """

    def __init__(self, *, max_size: int = 256):
        self._store: OrderedDict[str, str] = OrderedDict()
        self._max_size = max_size

    def get(self, path: str) -> str | None:
        """Retrieve content by path."""
        key = _key(path)
        if key not in self._store:
            return None
        self._store.move_to_end(key)
        return self._store[key]

    def set(self, path: str, content: str) -> None:
        """Store content for a path."""
        key = _key(path)
        if key not in self._store and len(self._store) >= self._max_size:
            evicted, _ = self._store.popitem(last=False)
            logger.debug("content_evicted", path=evicted)
        self._store[key] = content
        self._store.move_to_end(key)

    def delete(self, path: str) -> None:
        """Remove a path from the cache."""
        self._store.pop(_key(path), None)

    def exists(self, path: str) -> bool:
        return _key(path) in self._store

    def clear(self) -> None:
        """Remove all entries."""
        self._store.clear()

    def size(self) -> int:
        """Return current number of cached files."""
        return len(self._store)


class FileContentCache:
    """Read-through content cache backed by the filesystem.

    Content is re-read when the file's modification time changes. Entries
    set on ``overrides`` win over disk content, which lets an editor supply
    unsaved buffers.

    Example:
        cache = FileContentCache(max_size=128)
        text = cache.get("/work/thesis/chapter1.tex")
    """

    def __init__(
        self,
        *,
        max_size: int = 256,
        overrides: InMemoryContentCache | None = None,
        encoding: str = "utf-8",
    ):
        self._store: OrderedDict[str, tuple[float, str]] = OrderedDict()
        self._max_size = max_size
        self._encoding = encoding
        self.overrides = overrides if overrides is not None else InMemoryContentCache(max_size=max_size)

    def get(self, path: str) -> str | None:
        """Return current content of ``path`` or ``None`` if it cannot be read."""
        override = self.overrides.get(path)
        if override is not None:
            return override

        key = _key(path)
        try:
            mtime = os.stat(key).st_mtime
        except OSError:
            self._store.pop(key, None)
            return None

        cached = self._store.get(key)
        if cached is not None and cached[0] == mtime:
            self._store.move_to_end(key)
            return cached[1]

        try:
            content = Path(key).read_text(encoding=self._encoding, errors="replace")
        except OSError as exc:
            logger.debug("content_read_failed", path=key, error=str(exc))
            return None

        if key not in self._store and len(self._store) >= self._max_size:
            self._store.popitem(last=False)
        self._store[key] = (mtime, content)
        self._store.move_to_end(key)
        return content

    def invalidate(self, path: str) -> None:
        """Drop the cached disk content of ``path``."""
        self._store.pop(_key(path), None)

    def clear(self) -> None:
        self._store.clear()
        self.overrides.clear()

    def size(self) -> int:
        return len(self._store)


__all__ = [
    "ContentCache",
    "InMemoryContentCache",
    "FileContentCache",
]
