"""Re-indentation of brace-delimited source code."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import FormatterConfig
from .constants import LINE_TRIM_CHARS
from .detect import build_document
from .filesystem import read_source
from .models import Document, FormatResult, LexicalContext, SPANNING_CONTEXTS
from .rewriter import format_line_content
from .scanner import context_after_line, scan_line

logger = logging.getLogger(__name__)


def render_lines(document: Document, config: FormatterConfig) -> list[str]:
    """Re-indent each line of `document` from the running brace depth.

    Blank lines get the current indentation and nothing else. Lines that start
    inside a raw string, verbatim string or multi-line comment are re-indented
    but neither rewritten nor counted toward depth. Other lines are rewritten
    and a leading ``}`` dedents the line one level.

    Args:
        document: Lines and the detected indent unit.
        config: Options gating the spacing passes.

    Returns:
        list[str]: Rendered lines without line endings.
    """
    indent_unit = document.indent_unit
    context = LexicalContext.CODE
    depth = 0
    rendered: list[str] = []

    for line in document.lines:
        content = line.strip(LINE_TRIM_CHARS)

        if not content:
            rendered.append(indent_unit * depth)
            continue

        if context in SPANNING_CONTEXTS:
            rendered.append(indent_unit * depth + content)
            context = context_after_line(content, context)
            continue

        line_depth = max(0, depth - 1) if content.startswith("}") else depth
        scan = scan_line(content, context, depth)
        rendered.append(
            indent_unit * line_depth + format_line_content(content, config, scan.code_spans)
        )

        depth = scan.depth
        context = scan.context

    return rendered


def format_document(text: str, config: FormatterConfig | None = None) -> str:
    """Format brace-delimited source text.

    Indentation is recomputed from code-context brace depth using the indent
    unit detected from `text`, spacing is normalized in code regions, and lines
    are joined with the detected line ending. Never raises.

    Args:
        text: Source text.
        config: Formatting options. Defaults to a new `FormatterConfig`.

    Returns:
        str: Formatted text, or `text` itself when formatting is disabled.

    Examples:
        format_document("class C{\\nvoid M(){\\n}\\n}")
        # "class C{\\n\\tvoid M(){\\n\\t}\\n}"
    """
    config = config or FormatterConfig()
    if not config.enabled:
        logger.debug("Formatting disabled; returning text unchanged")
        return text

    document = build_document(text)
    logger.debug(
        "Formatting %d lines (line ending %r, indent unit %r)",
        len(document.lines),
        document.line_ending,
        document.indent_unit,
    )

    formatted = document.line_ending.join(render_lines(document, config))
    logger.debug("Formatting %s the text", "changed" if formatted != text else "did not change")
    return formatted


def format_file(
    filepath: Path,
    config: FormatterConfig | None = None,
    max_file_size: int | None = None,
) -> FormatResult:
    """Read and format a source file without writing it back.

    Args:
        filepath: Path to the source file.
        config: Formatting options; defaults to a new `FormatterConfig`.
        max_file_size: Optional override for the size limit in bytes.

    Returns:
        FormatResult: Original and formatted text, plus the stat taken when
            the file was read.

    Raises:
        FormatFileError: If the file is inaccessible, not a regular file, too
            large, or not valid UTF-8.

    Examples:
        result = format_file(Path("Program.cs"))
        if result.changed:
            print(result.formatted)
    """
    config = config or FormatterConfig()
    limit = config.max_file_size if max_file_size is None else max_file_size

    original, snapshot = read_source(filepath, limit)
    return FormatResult(
        original=original,
        formatted=format_document(original, config),
        source_stat=snapshot,
    )
