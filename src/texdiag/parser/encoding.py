"""
Repair file names mangled by a mismatched file-system encoding.

TeX engines write file names to the log as raw bytes. When the log is
decoded with a different encoding than the one the file system uses (common
on Windows with non-ASCII directory names), the path printed in the log does
not exist. The raw bytes are recovered and decoded again with each candidate
encoding until a path that exists is found.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable

from texdiag.core.logging import get_logger
from texdiag.core.settings import DEFAULT_FILENAME_ENCODINGS

logger = get_logger(__name__)


def _raw_candidates(path: str) -> list[bytes]:
    raws: list[bytes] = []
    for codec, errors in (("latin-1", "strict"), ("utf-8", "surrogateescape")):
        try:
            raw = path.encode(codec, errors)
        except UnicodeEncodeError:
            continue
        if raw not in raws:
            raws.append(raw)
    return raws


def convert_filename_encoding(
    path: str,
    encodings: Iterable[str] = DEFAULT_FILENAME_ENCODINGS,
    exists: Callable[[str], bool] = os.path.exists,
) -> str | None:
    """Return an existing re-decoded variant of ``path``, or ``None``."""
    encodings = list(encodings)
    for raw in _raw_candidates(path):
        for encoding in encodings:
            try:
                candidate = raw.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                continue
            if candidate != path and exists(candidate):
                logger.debug("filename_reencoded", original=path, resolved=candidate, encoding=encoding)
                return candidate
    return None


__all__ = ["convert_filename_encoding"]
