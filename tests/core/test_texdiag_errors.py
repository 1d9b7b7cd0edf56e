"""Tests for texdiag.core.errors module."""

from texdiag.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    LogReadError,
    StateError,
    TexDiagError,
)


class TestErrorCategory:
    """Test ErrorCategory enum."""

    def test_all_categories_defined(self):
        """Only the categories raised by texdiag errors exist."""
        assert {c.value for c in ErrorCategory} == {"SOURCE", "CONFIG", "STORAGE", "INTERNAL"}


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_empty_context(self):
        assert ErrorContext().to_dict() == {}

    def test_to_dict_merges_metadata(self):
        ctx = ErrorContext(path="main.log", metadata={"attempt": 2})
        assert ctx.to_dict() == {"path": "main.log", "attempt": 2}


class TestTexDiagError:
    """Test the base error."""

    def test_default_category(self):
        assert TexDiagError("boom").category == ErrorCategory.INTERNAL

    def test_subclass_categories(self):
        assert LogReadError("x").category == ErrorCategory.SOURCE
        assert ConfigError("x").category == ErrorCategory.CONFIG
        assert StateError("x").category == ErrorCategory.STORAGE

    def test_explicit_category_wins(self):
        assert LogReadError("x", category=ErrorCategory.INTERNAL).category == ErrorCategory.INTERNAL

    def test_cause_is_chained(self):
        cause = OSError("permission denied")
        error = LogReadError("Cannot read", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "permission denied"

    def test_with_context(self):
        """Known fields are set, others go to metadata."""
        error = StateError("Cannot write").with_context(path="/s/last_build.json", tool="LaTeX", size=3)
        assert error.context.path == "/s/last_build.json"
        assert error.context.tool == "LaTeX"
        assert error.context.metadata == {"size": 3}

    def test_to_dict(self):
        error = LogReadError("Cannot read log").with_context(path="main.log")
        assert error.to_dict() == {
            "error_type": "LogReadError",
            "message": "Cannot read log",
            "category": "SOURCE",
            "context": {"path": "main.log"},
        }

    def test_repr_and_str(self):
        error = ConfigError("bad")
        assert str(error) == "bad"
        assert repr(error) == "ConfigError('bad', category=CONFIG)"


class TestInvalidConfigError:
    """Test InvalidConfigError."""

    def test_default_message(self):
        error = InvalidConfigError("latex_exclude", "(")
        assert error.message == "Invalid configuration for latex_exclude: '('"
        assert isinstance(error, ConfigError)

    def test_custom_message(self):
        assert InvalidConfigError("k", 1, "nope").message == "nope"

