"""
Structured error types for texdiag.

The parsing core never raises: an unrecognised log degrades to zero
diagnostics. Errors only exist at the edges of the system, where a log file
has to be read, a configuration value has to be compiled, or the last-build
state has to be written. Those edges raise a ``TexDiagError`` subclass that
carries a category and structured context, so the CLI can render one
consistent error line and logs can include the metadata.

Architecture:
    ::

        TexDiagError (category, context, cause)
        ├── LogReadError          (SOURCE)
        ├── ConfigError           (CONFIG)
        │   └── InvalidConfigError
        └── StateError            (STORAGE)

Examples:
    >>> error = LogReadError("Cannot read build log").with_context(path="main.log")
    >>> error.to_dict()["context"]
    {'path': 'main.log'}

Tags:
    error-handling, exception-hierarchy, error-context, texdiag
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    SOURCE = "SOURCE"
    CONFIG = "CONFIG"
    STORAGE = "STORAGE"
    INTERNAL = "INTERNAL"

    def __str__(self) -> str:
        return self.value


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        path: File the failing operation touched (log, state file, source)
        tool: Tool family involved (``LaTeX``, ``BibTeX``, ``Biber``)
        metadata: Additional key-value pairs
    """

    path: str | None = None
    tool: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ["path", "tool"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class TexDiagError(Exception):
    """
    Base exception for all texdiag errors.

    Subclasses set ``default_category`` so callers rarely pass one
    explicitly.

    Examples:
        >>> error = TexDiagError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> try:
        ...     raise OSError("permission denied")
        ... except OSError as e:
        ...     error = LogReadError("Cannot read log", cause=e)
        >>> error.cause
        OSError('permission denied')
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TexDiagError:
        """
        Add context to this error (fluent API).

        Usage:
            raise LogReadError("Failed").with_context(path="build/main.log")
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class LogReadError(TexDiagError):
    """A build log could not be read."""

    default_category = ErrorCategory.SOURCE


class ConfigError(TexDiagError):
    """
    Configuration error.

    Never recoverable at runtime - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None, **kwargs: Any):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}", **kwargs)


class StateError(TexDiagError):
    """The persisted last-build state could not be written."""

    default_category = ErrorCategory.STORAGE


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TexDiagError",
    "LogReadError",
    "ConfigError",
    "InvalidConfigError",
    "StateError",
]
