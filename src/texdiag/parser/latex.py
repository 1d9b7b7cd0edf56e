"""
LaTeX engine log parser.

Scans the output of one LaTeX run line by line and keeps track of which
input file TeX is reading from the parentheses it prints when it opens
``(./chapter.tex`` and closes ``)`` a file.

Recognised messages::

    ! Undefined control sequence.          error, line from the ``l.N`` line
    ./main.tex:12: Undefined control ...   error (file-line-error mode)
    LaTeX Warning: ... on input line 12.   warning
    Package foo Warning: ...               warning, ``(foo)`` lines continue it
    Overfull \\hbox (...) in paragraph at lines 10--12
                                           typesetting (bad box)

The ``l.N <context>`` line TeX prints after an error holds the source text
up to the offending token; it becomes the entry's ``error_pos_text``.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Sequence

from texdiag.core.logging import get_logger
from texdiag.models import EntryKind, LogEntry
from texdiag.parser.base import is_excluded, resolve_path

logger = get_logger(__name__)

# TeX's default max_print_line
LOG_LINE_WIDTH = 79

LATEX_ERROR = re.compile(r"^(?:(.*):(\d+):|!)(?: (.+) Error:)? (.+?)$")
LATEX_BOX = re.compile(
    r"^((?:Over|Under)full \\[vh]box \([^)]*\)) in (?:paragraph|alignment) at lines (\d+)--(\d+)$"
)
LATEX_BOX_AT = re.compile(r"^((?:Over|Under)full \\[vh]box \([^)]*\)) detected at line (\d+)$")
LATEX_BOX_OUTPUT = re.compile(r"^((?:Over|Under)full \\[vh]box \([^)]*\)) has occurred while \\output is active")
LATEX_WARNING = re.compile(
    r"^((?:(?:Class|Package|Module) \S*)|LaTeX(?: \S*)?|LaTeX3) Warning:\s+(.*?)(?: on input line (\d+))?(\.|\?|)$"
)
WARNING_CONTINUATION = re.compile(r"^\(([^)]*)\)\s+(.*?)(?: on input line (\d+))?(\.)?$")
LINE_CONTEXT = re.compile(r"^l\.(\d+)\s(?:\.\.\.)?(.*)$")
RUN_FINISHED = re.compile(r"^(Output written on|No pages of output|Transcript written on)")
FILE_TOKEN = re.compile(r'\((?P<path>"[^"]*"|[^\s(){}\[\]"]*)|(?P<close>\))')
LOOKS_LIKE_FILE = re.compile(r"^(?:\.{0,2}/|[A-Za-z]:[\\/]|/).+|.+\.[A-Za-z0-9]{1,8}$")


def unwrap_log_lines(log: str, width: int = LOG_LINE_WIDTH) -> list[str]:
    """Join lines TeX hard-wrapped at ``width`` columns."""
    lines = log.split("\n")
    merged: list[str] = []
    i = 0
    while i < len(lines):
        current = lines[i]
        while len(lines[i]) >= width and i + 1 < len(lines):
            i += 1
            current += lines[i]
        merged.append(current)
        i += 1
    return merged


@dataclasses.dataclass
class _ScanState:
    root_file: str | None
    file_stack: list[str] = dataclasses.field(default_factory=list)
    first_tex: str | None = None
    entries: list[LogEntry] = dataclasses.field(default_factory=list)
    pending_error: LogEntry | None = None
    error_context_seen: bool = False
    warning_index: int | None = None
    warning_source: str | None = None
    in_box: bool = False

    def current_file(self) -> str | None:
        for path in reversed(self.file_stack):
            if path:
                return resolve_path(path, self.root_file)
        root = self.root_file or self.first_tex
        return resolve_path(root, None) if root else None


class LatexLogParser:
    """Extracts entries from LaTeX engine output.

    Parameters
    ----------
    show_badboxes
        Report over/underfull boxes as ``typesetting`` entries.
    exclude
        Compiled regexes; matching messages are dropped.
    """

    def __init__(
        self,
        *,
        show_badboxes: bool = True,
        exclude: Sequence[re.Pattern[str]] = (),
    ) -> None:
        self.show_badboxes = show_badboxes
        self.exclude = list(exclude)
        self.build_log: list[LogEntry] = []

    def parse(self, log: str, root_file: str | None = None) -> list[LogEntry]:
        state = _ScanState(root_file=root_file)
        for line in unwrap_log_lines(log):
            self._parse_line(line, state)
        self._flush_error(state)

        self.build_log = [
            entry for entry in state.entries if entry.file and not is_excluded(entry.text, self.exclude)
        ]
        logger.debug("latex_log_parsed", entries=len(self.build_log), root_file=root_file)
        return self.build_log

    # ------------------------------------------------------------------
    # Line handling
    # ------------------------------------------------------------------

    def _parse_line(self, line: str, state: _ScanState) -> None:
        if state.pending_error is not None:
            if self._continue_error(line, state):
                return

        if state.warning_index is not None:
            result = WARNING_CONTINUATION.match(line)
            if result and state.warning_source and result.group(1) == state.warning_source:
                self._continue_warning(result, state)
                return
            state.warning_index = None

        if state.in_box:
            if not line.strip():
                state.in_box = False
            return

        if RUN_FINISHED.match(line):
            return

        if self._match_box(line, state):
            return

        result = LATEX_WARNING.match(line)
        if result:
            self._start_warning(result, state)
            return

        result = LATEX_ERROR.match(line)
        if result and not result.group(4).startswith("==> Fatal error occurred"):
            self._start_error(result, state)
            return

        self._track_files(line, state)

    def _start_error(self, result: re.Match[str], state: _ScanState) -> None:
        file_name, line_no, package, message = result.groups()
        text = f"{package}: {message}" if package and package != "LaTeX" else message
        file = resolve_path(file_name, state.root_file) if file_name else state.current_file()
        state.pending_error = LogEntry(
            kind=EntryKind.ERROR,
            file=file or "",
            text=text,
            line=int(line_no) if line_no else 0,
        )
        state.error_context_seen = False

    def _continue_error(self, line: str, state: _ScanState) -> bool:
        """Consume lines belonging to the pending error. False ends the error."""
        if state.error_context_seen:
            # the line after ``l.N`` continues the quoted source text
            self._flush_error(state)
            return True
        result = LINE_CONTEXT.match(line)
        if result:
            error = state.pending_error
            assert error is not None
            state.pending_error = dataclasses.replace(
                error,
                line=error.line or int(result.group(1)),
                error_pos_text=result.group(2) or None,
            )
            state.error_context_seen = True
            return True
        if LATEX_ERROR.match(line) or LATEX_WARNING.match(line) or RUN_FINISHED.match(line):
            self._flush_error(state)
            return False
        # TeX's context lines (<argument>, <recently read>, ...) quote source text
        return True

    def _flush_error(self, state: _ScanState) -> None:
        error = state.pending_error
        if error is None:
            return
        if error.line < 1:
            error = dataclasses.replace(error, line=1)
        state.entries.append(error)
        state.pending_error = None
        state.error_context_seen = False

    def _start_warning(self, result: re.Match[str], state: _ScanState) -> None:
        source, message, line_no, _ = result.groups()
        state.entries.append(
            LogEntry(
                kind=EntryKind.WARNING,
                file=state.current_file() or "",
                text=message,
                line=int(line_no) if line_no else 1,
            )
        )
        state.warning_index = len(state.entries) - 1
        state.warning_source = source.split()[-1]

    def _continue_warning(self, result: re.Match[str], state: _ScanState) -> None:
        assert state.warning_index is not None
        warning = state.entries[state.warning_index]
        _, text, line_no, _ = result.groups()
        state.entries[state.warning_index] = dataclasses.replace(
            warning,
            text=f"{warning.text} {text}",
            line=int(line_no) if line_no else warning.line,
        )

    def _match_box(self, line: str, state: _ScanState) -> bool:
        result = LATEX_BOX.match(line) or LATEX_BOX_AT.match(line)
        if result:
            line_no = int(result.group(2))
        else:
            result = LATEX_BOX_OUTPUT.match(line)
            if not result:
                return False
            line_no = 1
        state.in_box = True
        if self.show_badboxes:
            state.entries.append(
                LogEntry(
                    kind=EntryKind.TYPESETTING,
                    file=state.current_file() or "",
                    text=result.group(1),
                    line=line_no,
                )
            )
        return True

    def _track_files(self, line: str, state: _ScanState) -> None:
        for token in FILE_TOKEN.finditer(line):
            if token.group("close") is not None:
                if state.file_stack:
                    state.file_stack.pop()
                continue
            path = token.group("path").strip('"')
            if path and LOOKS_LIKE_FILE.match(path):
                state.file_stack.append(path)
                if state.first_tex is None and path.endswith(".tex"):
                    state.first_tex = path
            else:
                state.file_stack.append("")


__all__ = ["LatexLogParser", "unwrap_log_lines"]
