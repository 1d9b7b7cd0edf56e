"""Log canonicalisation, tool detection, trimming and the tool parsers.

Import concrete parsers from their modules, e.g.
``from texdiag.parser.compiler import CompilerLogParser``.
"""
