"""Per-character lexical context tracking.

A single walk over a line yields the context carried into the next line, the
brace depth after the line, and the ranges of the line that are plain code.
Braces only count while the walk is in code context.
"""

from __future__ import annotations

from .models import LexicalContext, LineScan

# Openers recognized from code context, in priority order.
CODE_OPENERS: tuple[tuple[str, LexicalContext], ...] = (
    ("//", LexicalContext.SINGLE_LINE_COMMENT),
    ("/*", LexicalContext.MULTI_LINE_COMMENT),
    ('@"', LexicalContext.VERBATIM_STRING),
    ('$@"', LexicalContext.VERBATIM_STRING),
    ('@$"', LexicalContext.VERBATIM_STRING),
    ('$"', LexicalContext.INTERPOLATED_STRING),
    ('"""', LexicalContext.RAW_STRING),
    ('"', LexicalContext.STRING),
    ("'", LexicalContext.CHAR),
)


def match_opener(line: str, pos: int) -> tuple[str, LexicalContext] | None:
    """Return the literal or comment opener starting at `pos`, if any.

    Examples:
        match_opener('x = @"a"', 4)  # ('@"', LexicalContext.VERBATIM_STRING)
        match_opener("x = 1", 0)  # None
    """
    for token, context in CODE_OPENERS:
        if line.startswith(token, pos):
            return token, context
    return None


def skip_interpolation_hole(line: str, pos: int) -> int:
    """Skip an interpolation hole whose opening ``{`` sits at `pos`.

    Nested braces are balanced by plain counting; quotes inside the hole are not
    interpreted.

    Returns:
        int: Index just past the matching ``}``, or the line length when the
            hole is not closed on this line.

    Examples:
        skip_interpolation_hole('$"{a[{b}]} x"', 2)  # 10
    """
    brace_count = 1
    i = pos + 1
    while i < len(line) and brace_count > 0:
        if line[i] == "{":
            brace_count += 1
        elif line[i] == "}":
            brace_count -= 1
        i += 1
    return i


def _step_escaped(line: str, pos: int, quote: str) -> tuple[int, bool]:
    if line[pos] == "\\":
        return pos + 2, False
    if line[pos] == quote:
        return pos + 1, True
    return pos + 1, False


def _step_verbatim(line: str, pos: int) -> tuple[int, bool]:
    if line.startswith('""', pos):
        return pos + 2, False
    if line[pos] == '"':
        return pos + 1, True
    return pos + 1, False


def _step_raw(line: str, pos: int) -> tuple[int, bool]:
    if line.startswith('"""', pos):
        return pos + 3, True
    return pos + 1, False


def _step_interpolated(line: str, pos: int) -> tuple[int, bool]:
    char = line[pos]
    if char == "\\":
        return pos + 2, False
    if char == "{":
        if line.startswith("{{", pos):
            return pos + 2, False
        return skip_interpolation_hole(line, pos), False
    if char == '"':
        return pos + 1, True
    return pos + 1, False


def _step_multi_line_comment(line: str, pos: int) -> tuple[int, bool]:
    if line.startswith("*/", pos):
        return pos + 2, True
    return pos + 1, False


def _step_literal(line: str, pos: int, context: LexicalContext) -> tuple[int, bool]:
    """Advance one step inside a non-code context.

    Returns:
        tuple[int, bool]: Next scan position and whether the step closed the
            literal or comment.
    """
    if context is LexicalContext.STRING:
        return _step_escaped(line, pos, '"')
    if context is LexicalContext.CHAR:
        return _step_escaped(line, pos, "'")
    if context is LexicalContext.VERBATIM_STRING:
        return _step_verbatim(line, pos)
    if context is LexicalContext.RAW_STRING:
        return _step_raw(line, pos)
    if context is LexicalContext.INTERPOLATED_STRING:
        return _step_interpolated(line, pos)
    if context is LexicalContext.MULTI_LINE_COMMENT:
        return _step_multi_line_comment(line, pos)
    # A single-line comment swallows the rest of the line.
    return len(line), False


def scan_line(
    line: str, context: LexicalContext = LexicalContext.CODE, depth: int = 0
) -> LineScan:
    """Walk one line from a starting context and brace depth.

    In code context the openers of `CODE_OPENERS` switch context and are
    consumed whole; ``{`` and ``}`` move the depth, which is clamped at zero.
    A ``//`` ends the walk since the comment covers the rest of the line.

    Args:
        line: Raw text of the line, without its line ending.
        context: Context active before the first character.
        depth: Brace depth before the line.

    Returns:
        LineScan: Context after the line, depth after the line, and code spans.

    Examples:
        scan_line("if (x) {").depth  # 1
        scan_line('var s = "{ not a brace }";').depth  # 0
        scan_line("/* open", LexicalContext.CODE).context  # MULTI_LINE_COMMENT
    """
    code_spans: list[tuple[int, int]] = []
    code_start = 0
    i = 0

    while i < len(line):
        if context is not LexicalContext.CODE:
            i, closed = _step_literal(line, i, context)
            if closed:
                context = LexicalContext.CODE
                code_start = i
            continue

        opener = match_opener(line, i)
        if opener is None:
            if line[i] == "{":
                depth += 1
            elif line[i] == "}":
                depth = max(0, depth - 1)
            i += 1
            continue

        if i > code_start:
            code_spans.append((code_start, i))

        token, context = opener
        if context is LexicalContext.SINGLE_LINE_COMMENT:
            return LineScan(LexicalContext.CODE, depth, code_spans)
        i += len(token)

    if context is LexicalContext.CODE and len(line) > code_start:
        code_spans.append((code_start, len(line)))

    # Single-line comments never carry across a line boundary.
    if context is LexicalContext.SINGLE_LINE_COMMENT:
        context = LexicalContext.CODE

    return LineScan(context, depth, code_spans)


def context_after_line(line: str, context: LexicalContext) -> LexicalContext:
    """Return the context carried into the line after `line`."""
    return scan_line(line, context).context


def update_depth(line: str, depth: int, context: LexicalContext) -> int:
    """Return the brace depth after `line`, counting code-context braces only."""
    return scan_line(line, context, depth).depth
