"""Whole-text detection of line endings and indentation style."""

from __future__ import annotations

import re

from .constants import CRLF, LF, SPACE_INDENT, TAB_INDENT
from .models import Document

LINE_BREAK_PATTERN = re.compile(r"\r?\n")
BARE_LF_PATTERN = re.compile(r"(?<!\r)\n")


def split_lines(text: str) -> list[str]:
    """Split text on ``\\n`` and ``\\r\\n`` boundaries.

    A lone ``\\r`` is not a boundary and stays part of its line. Text ending
    with a line break yields a trailing empty line.

    Examples:
        split_lines("a\\r\\nb\\n")  # ["a", "b", ""]
    """
    return LINE_BREAK_PATTERN.split(text)


def detect_line_ending(text: str) -> str:
    """Pick the line ending used to join formatted output.

    Counts ``\\r\\n`` pairs against bare ``\\n`` characters; a ``\\n`` preceded by
    ``\\r`` only counts as part of its pair.

    Args:
        text: Full document text.

    Returns:
        str: ``"\\r\\n"`` when pairs are at least as frequent as bare ``\\n``,
            otherwise ``"\\n"``. Text without any line break yields ``"\\n"``.

    Examples:
        detect_line_ending("a\\r\\nb\\r\\nc\\n")  # "\\r\\n"
        detect_line_ending("a\\nb")  # "\\n"
    """
    crlf_count = text.count(CRLF)
    lf_count = len(BARE_LF_PATTERN.findall(text))
    if crlf_count == 0 and lf_count == 0:
        return LF
    return CRLF if crlf_count >= lf_count else LF


def detect_indent_style(text: str) -> str:
    """Pick the indent unit from the dominant leading whitespace.

    A line counts toward tabs when it starts with a tab, otherwise toward
    spaces when it starts with at least four spaces.

    Args:
        text: Full document text.

    Returns:
        str: A tab when tab-led lines are at least as common as space-led
            lines, otherwise four spaces.

    Examples:
        detect_indent_style("class C\\n{\\n    int x;\\n}")  # "    "
    """
    tabs = 0
    spaces = 0
    for line in split_lines(text):
        if line.startswith(TAB_INDENT):
            tabs += 1
        elif line.startswith(SPACE_INDENT):
            spaces += 1

    return TAB_INDENT if tabs >= spaces else SPACE_INDENT


def build_document(text: str) -> Document:
    """Split `text` into a `Document` carrying its detected conventions."""
    return Document(
        lines=split_lines(text),
        line_ending=detect_line_ending(text),
        indent_unit=detect_indent_style(text),
    )
