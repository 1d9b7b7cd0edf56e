"""
Centralized settings for texdiag.

Manifesto:
    One validated, cached settings object replaces ad-hoc option parsing in
    the CLI and the parsers. Values come from ``TEXDIAG_*`` environment
    variables or a ``.env`` file and are type-checked at startup.

Examples:
    >>> from texdiag.core.settings import get_settings
    >>> settings = get_settings()
    >>> settings.convert_filename_encoding
    True

    Environment override (lists are JSON encoded)::

        TEXDIAG_CONVERT_FILENAME_ENCODING=false
        TEXDIAG_LATEX_EXCLUDE='["^Marginpar on page"]'

Tags:
    texdiag, configuration, settings, pydantic, caching
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from texdiag.core.errors import InvalidConfigError

DEFAULT_FILENAME_ENCODINGS = [
    "utf-8",
    "cp1252",
    "cp1250",
    "cp1251",
    "cp1253",
    "cp1254",
    "cp1255",
    "cp1256",
    "cp1257",
    "cp1258",
    "iso8859-2",
    "koi8-r",
    "cp932",
    "shift_jis",
    "euc-jp",
    "gbk",
    "gb18030",
    "big5",
    "euc-kr",
]


class TexDiagSettings(BaseSettings):
    """texdiag configuration.

    All fields can be set via ``TEXDIAG_*`` environment variables (e.g.
    ``TEXDIAG_SHOW_BADBOXES=false``) or through a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="TEXDIAG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Publishing ───────────────────────────────────────────────
    convert_filename_encoding: bool = Field(
        default=True,
        description="Re-encode file names that do not exist on disk before publishing",
    )
    filename_encodings: list[str] = Field(default_factory=lambda: list(DEFAULT_FILENAME_ENCODINGS))

    # ── Parsers ──────────────────────────────────────────────────
    show_badboxes: bool = Field(default=True, description="Report over/underfull boxes")
    latex_exclude: list[str] = Field(default_factory=list, description="Regexes of LaTeX messages to drop")
    bibtex_exclude: list[str] = Field(default_factory=list, description="Regexes of BibTeX/Biber messages to drop")

    # ── Source cache ─────────────────────────────────────────────
    cache_max_size: int = Field(default=256, ge=1)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="WARNING")
    json_logs: bool | None = Field(default=None, description="None = JSON when stderr is not a tty")

    # ── Storage ──────────────────────────────────────────────────
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".texdiag",
        description="Directory holding the last-build state",
    )

    @property
    def state_file(self) -> Path:
        return self.data_dir / "last_build.json"

    def latex_exclude_patterns(self) -> list[re.Pattern[str]]:
        """Compile ``latex_exclude``; raises :class:`InvalidConfigError` on a bad regex."""
        return _compile_all("latex_exclude", self.latex_exclude)

    def bibtex_exclude_patterns(self) -> list[re.Pattern[str]]:
        """Compile ``bibtex_exclude``; raises :class:`InvalidConfigError` on a bad regex."""
        return _compile_all("bibtex_exclude", self.bibtex_exclude)


def _compile_all(key: str, patterns: list[str]) -> list[re.Pattern[str]]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise InvalidConfigError(key, pattern, cause=exc) from exc
    return compiled


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, TexDiagSettings] = {}


def get_settings(*, _force_reload: bool = False) -> TexDiagSettings:
    """Load, validate, and cache a :class:`TexDiagSettings` instance.

    Parameters
    ----------
    _force_reload:
        Bypass cache and reload from the environment.
    """
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = TexDiagSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = [
    "DEFAULT_FILENAME_ENCODINGS",
    "TexDiagSettings",
    "get_settings",
    "clear_settings_cache",
]
