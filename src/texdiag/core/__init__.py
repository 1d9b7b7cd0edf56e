"""Shared infrastructure: logging, errors, settings and source caches."""

from texdiag.core.cache import ContentCache, FileContentCache, InMemoryContentCache
from texdiag.core.errors import (
    ConfigError,
    ErrorCategory,
    InvalidConfigError,
    LogReadError,
    StateError,
    TexDiagError,
)
from texdiag.core.logging import LogContext, configure_logging, get_logger
from texdiag.core.settings import TexDiagSettings, get_settings

__all__ = [
    "ContentCache",
    "FileContentCache",
    "InMemoryContentCache",
    "ConfigError",
    "ErrorCategory",
    "InvalidConfigError",
    "LogReadError",
    "StateError",
    "TexDiagError",
    "LogContext",
    "configure_logging",
    "get_logger",
    "TexDiagSettings",
    "get_settings",
]
