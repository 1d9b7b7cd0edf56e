"""
Compiler log dispatcher.

Takes the raw output of a build (latexmk, texify, or a bare engine run),
decides which tools wrote into it, cuts it down to the last relevant run
and hands the pieces to the tool-specific parsers. Their entries are
published into one collection per tool family.

Architecture::

    parse(log, root_file)
    │
    ├── canonicalize line endings
    ├── BibTeX banner?  → trim to last BibTeX run (latexmk) → BibTeX parser → "BibTeX"
    │   elif Biber banner? → trim to last Biber run (latexmk) → Biber parser → "Biber"
    ├── latexmk rules?  → trim to last LaTeX rule
    │   elif texify run? → trim to last LaTeX run
    ├── output written / fatal error? → LaTeX parser → "LaTeX"
    │   else latexmk up-to-date only? → republish last batches, return True
    ▼
    bool (was this a skipped latexmk run)

The bibliography branch and the LaTeX branch both look at the canonical
log; neither sees the other's trimmed text.

Example::

    parser = CompilerLogParser.from_settings(get_settings())
    skipped = parser.parse(log_text, "/work/thesis/main.tex")
    for path, diagnostics in parser.collections.latex.items():
        ...
"""

from __future__ import annotations

import re

from texdiag.core.cache import ContentCache, FileContentCache
from texdiag.core.logging import LogContext, get_logger
from texdiag.core.settings import TexDiagSettings
from texdiag.diagnostics.collection import DiagnosticCollections
from texdiag.diagnostics.publisher import DiagnosticPublisher
from texdiag.parser import patterns
from texdiag.parser.base import LogParser
from texdiag.parser.biber import BiberLogParser
from texdiag.parser.bibtex import BibtexLogParser
from texdiag.parser.latex import LatexLogParser
from texdiag.parser.trim import trim_latexmk, trim_latexmk_biber, trim_latexmk_bibtex, trim_texify

logger = get_logger(__name__)

LINE_ENDINGS = re.compile(r"\r\n|\r")


def canonicalize_line_endings(log: str) -> str:
    """Convert ``\\r\\n`` and lone ``\\r`` to ``\\n``."""
    return LINE_ENDINGS.sub("\n", log)


def latexmk_skipped(log: str) -> bool:
    """True if latexmk found every target up-to-date and applied no rule.

    A log that applies rules is a real run even if it also reports some
    target as up-to-date.
    """
    return patterns.contains(patterns.LATEXMK_UP_TO_DATE, log) and not patterns.contains(
        patterns.LATEXMK_RULE, log
    )


class CompilerLogParser:
    """Dispatches a build log to the tool parsers and publishes the results.

    Parameters
    ----------
    latex, bibtex, biber
        Tool parsers. Each keeps its last batch on ``build_log``.
    publisher
        Writes diagnostics into the collections.
    collections
        Target collections, one per tool family.
    """

    def __init__(
        self,
        *,
        latex: LogParser,
        bibtex: LogParser,
        biber: LogParser,
        publisher: DiagnosticPublisher,
        collections: DiagnosticCollections | None = None,
    ) -> None:
        self.latex = latex
        self.bibtex = bibtex
        self.biber = biber
        self.publisher = publisher
        self.collections = collections if collections is not None else DiagnosticCollections()

    @classmethod
    def from_settings(
        cls,
        settings: TexDiagSettings,
        *,
        cache: ContentCache | None = None,
        collections: DiagnosticCollections | None = None,
    ) -> CompilerLogParser:
        """Wire the default parsers, cache and publisher from settings."""
        cache = cache if cache is not None else FileContentCache(max_size=settings.cache_max_size)
        bib_exclude = settings.bibtex_exclude_patterns()
        return cls(
            latex=LatexLogParser(
                show_badboxes=settings.show_badboxes,
                exclude=settings.latex_exclude_patterns(),
            ),
            bibtex=BibtexLogParser(cache, exclude=bib_exclude),
            biber=BiberLogParser(cache, exclude=bib_exclude),
            publisher=DiagnosticPublisher(
                cache,
                convert_encoding=settings.convert_filename_encoding,
                encodings=settings.filename_encodings,
            ),
            collections=collections,
        )

    def parse(self, log: str, root_file: str | None = None) -> bool:
        """Parse ``log`` and publish diagnostics.

        Returns whether the build was a latexmk run that skipped every
        target, in which case the previous diagnostics were republished.
        """
        log = canonicalize_line_endings(log)
        with LogContext(root_file=root_file):
            is_latexmk = patterns.contains(patterns.LATEXMK_RULE, log)

            if patterns.contains(patterns.BIBTEX_BANNER, log):
                logger.debug("tool_detected", tool="bibtex", latexmk=is_latexmk)
                entries = self.bibtex.parse(trim_latexmk_bibtex(log) if is_latexmk else log, root_file)
                self.publisher.publish(self.collections.bibtex, entries, "BibTeX")
            elif patterns.contains(patterns.BIBER_BANNER, log):
                logger.debug("tool_detected", tool="biber", latexmk=is_latexmk)
                entries = self.biber.parse(trim_latexmk_biber(log) if is_latexmk else log, root_file)
                self.publisher.publish(self.collections.biber, entries, "Biber")

            if is_latexmk:
                log = trim_latexmk(log)
            elif patterns.contains(patterns.TEXIFY_RUN, log):
                log = trim_texify(log)

            if patterns.contains(patterns.LATEX_OUTPUT, log) or patterns.contains(patterns.LATEX_FATAL, log):
                logger.debug("tool_detected", tool="latex")
                entries = self.latex.parse(log, root_file)
                self.publisher.publish(self.collections.latex, entries, "LaTeX")
                return False
            return self.republish_if_skipped(log)

    def republish_if_skipped(self, log: str) -> bool:
        """Republish the last known batches when latexmk skipped the build."""
        if not latexmk_skipped(log):
            return False
        logger.info("latexmk_skipped", latex=len(self.latex.build_log))
        self.publisher.publish(self.collections.latex, self.latex.build_log, "LaTeX")
        self.publisher.publish(self.collections.bibtex, self.bibtex.build_log, "BibTeX")
        self.publisher.publish(self.collections.biber, self.biber.build_log, "Biber")
        return True

    def latex_segment(self, log: str) -> str:
        """Return the part of ``log`` that would be handed to the LaTeX parser."""
        log = canonicalize_line_endings(log)
        if patterns.contains(patterns.LATEXMK_RULE, log):
            return trim_latexmk(log)
        if patterns.contains(patterns.TEXIFY_RUN, log):
            return trim_texify(log)
        return log


__all__ = ["CompilerLogParser", "canonicalize_line_endings", "latexmk_skipped"]
