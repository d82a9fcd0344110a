"""Data models for gentle-format."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum, auto


class LexicalContext(Enum):
    """Sub-language active at a scan position.

    Attributes:
        CODE: Plain code; the only context where braces change depth.
        STRING: Double-quoted, escape-aware string.
        VERBATIM_STRING: ``@"..."`` string; ``""`` escapes a quote, may span lines.
        RAW_STRING: ``\"\"\"...\"\"\"`` string without escapes, may span lines.
        INTERPOLATED_STRING: ``$"..."`` string with ``{expr}`` holes.
        CHAR: Single-quoted, escape-aware character literal.
        SINGLE_LINE_COMMENT: ``//`` comment; never carried past a line end.
        MULTI_LINE_COMMENT: ``/* ... */`` comment, may span lines.
    """

    CODE = auto()
    STRING = auto()
    VERBATIM_STRING = auto()
    RAW_STRING = auto()
    INTERPOLATED_STRING = auto()
    CHAR = auto()
    SINGLE_LINE_COMMENT = auto()
    MULTI_LINE_COMMENT = auto()


# Contexts whose lines are re-indented but never rewritten.
SPANNING_CONTEXTS = frozenset(
    {
        LexicalContext.RAW_STRING,
        LexicalContext.VERBATIM_STRING,
        LexicalContext.MULTI_LINE_COMMENT,
    }
)


@dataclass
class LineScan:
    """Outcome of scanning one line.

    Attributes:
        context: Context active after the last character of the line.
        depth: Brace depth after the line, never below zero.
        code_spans: Half-open ``(start, end)`` ranges scanned in code context.
    """

    context: LexicalContext
    depth: int
    code_spans: list[tuple[int, int]] = field(default_factory=list)


@dataclass
class Document:
    """Lines of one formatting run plus the conventions detected for it.

    Attributes:
        lines: Text split on ``\\n`` / ``\\r\\n`` boundaries.
        line_ending: Line ending used to join the output.
        indent_unit: Indentation emitted once per depth level.
    """

    lines: list[str]
    line_ending: str
    indent_unit: str


@dataclass
class FormatResult:
    """Result of formatting a source file.

    Attributes:
        original: File content as read, line endings untouched.
        formatted: Content after formatting.
        source_stat: Stat of the file taken when it was read, if it came from
            disk.
    """

    original: str
    formatted: str
    source_stat: os.stat_result | None = field(default=None, compare=False, repr=False)

    @property
    def changed(self) -> bool:
        return self.original != self.formatted
