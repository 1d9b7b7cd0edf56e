"""
Tests for texdiag.core.logging.

Tests verify:
- JSON output carries the service name and bound context
- Events below the configured level are dropped
- LogContext unbinds on exit
"""

import json

import structlog

from texdiag.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


def last_json_line(text: str) -> dict:
    lines = [line for line in text.splitlines() if line.startswith("{")]
    return json.loads(lines[-1])


class TestConfigureLogging:
    """Processor chain and rendering."""

    def test_json_output_to_stderr(self, capsys):
        configure_logging(level="DEBUG", json_format=True, service="texdiag-test")
        get_logger("texdiag.tests").info("tool_detected", tool="bibtex")

        captured = capsys.readouterr()
        assert captured.out == ""
        event = last_json_line(captured.err)
        assert event["event"] == "tool_detected"
        assert event["tool"] == "bibtex"
        assert event["service"] == "texdiag-test"
        assert event["level"] == "info"
        assert event["logger_name"] == "texdiag.tests"
        assert "timestamp" in event

    def test_level_filtering(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        logger = get_logger("texdiag.tests")
        logger.debug("hidden")
        logger.warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert last_json_line(err)["event"] == "shown"

    def test_parser_debug_events_stay_off_stdout(self, capsys, make_parser):
        """Once configured, library parsing emits nothing below the level."""
        configure_logging(level="WARNING", json_format=True)
        make_parser().parse("Latexmk: applying rule 'pdflatex'...\nOutput written on a.pdf (1 page).\n")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "log_trimmed" not in captured.err

    def test_without_timestamp(self, capsys):
        configure_logging(level="INFO", json_format=True, add_timestamp=False)
        get_logger().info("no_time")
        assert "timestamp" not in last_json_line(capsys.readouterr().err)


class TestContext:
    """contextvars binding."""

    def test_bind_and_unbind(self, capsys):
        configure_logging(level="INFO", json_format=True)
        bind_context(root_file="main.tex", tool="latex")
        unbind_context("tool")
        get_logger().info("parsed")

        event = last_json_line(capsys.readouterr().err)
        assert event["root_file"] == "main.tex"
        assert "tool" not in event
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_log_context_scope(self, capsys):
        configure_logging(level="INFO", json_format=True)
        with LogContext(root_file="/work/main.tex"):
            get_logger().info("inside")
        get_logger().info("outside")

        lines = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line.startswith("{")]
        assert lines[0]["root_file"] == "/work/main.tex"
        assert "root_file" not in lines[1]
