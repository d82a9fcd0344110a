"""Keyword and operator spacing for code content."""

from __future__ import annotations

import re

from .config import FormatterConfig
from .constants import COMMENT_MARKERS, SPACED_KEYWORDS

# Word characters are ASCII-only, matching identifier and digit operands.
_FLAGS = re.ASCII

KEYWORD_PATTERNS = [
    re.compile(rf"\b({keyword})\(", _FLAGS) for keyword in SPACED_KEYWORDS
]

# Rejoin operators split by whitespace, such as "& &" or "?? ="
OPERATOR_REPAIRS = [
    (re.compile(r"&\s+(?=&)"), "&"),
    (re.compile(r"\|\s+(?=\|)"), "|"),
    (re.compile(r"\?\s+(?=\?)"), "?"),
    (re.compile(r"\?\?\s+="), "??="),
]

# Each rule consumes its left operand and looks ahead for its right operand
OPERATOR_RULES = [
    # Logical
    (re.compile(r"(\w)\s*&&\s*(?=\w)", _FLAGS), r"\1 && "),
    (re.compile(r"(\w)\s*\|\|\s*(?=\w)", _FLAGS), r"\1 || "),
    # Null coalescing
    (re.compile(r"(\w)\s*\?\?=\s*(?=\w)", _FLAGS), r"\1 ??= "),
    (re.compile(r"(\w)\s*\?\?(?!=)\s*(?=\w)", _FLAGS), r"\1 ?? "),
    # Comparison
    (re.compile(r"(\w)\s*==\s*(?=\w)", _FLAGS), r"\1 == "),
    (re.compile(r"(\w)\s*!=\s*(?=\w)", _FLAGS), r"\1 != "),
    (re.compile(r"(\w)\s*<=\s*(?=\w)", _FLAGS), r"\1 <= "),
    (re.compile(r"(\w)\s*>=\s*(?=\w)", _FLAGS), r"\1 >= "),
    # Lambda
    (re.compile(r"(\w)\s*=>\s*(?=\w)", _FLAGS), r"\1 => "),
    (re.compile(r"\)\s*=>\s*(?=\w)", _FLAGS), ") => "),
    (re.compile(r"\)\s*=>$", _FLAGS), ") =>"),
    # Compound assignment
    (re.compile(r"(\w)\s*\+=\s*(?=\w)", _FLAGS), r"\1 += "),
    (re.compile(r"(\w)\s*-=\s*(?=\w)", _FLAGS), r"\1 -= "),
    (re.compile(r"(\w)\s*\*=\s*(?=\w)", _FLAGS), r"\1 *= "),
    (re.compile(r"(\w)\s*/=\s*(?=\w)", _FLAGS), r"\1 /= "),
    # Simple assignment between two word characters
    (re.compile(r"(?<=\w)=(?=\w)", _FLAGS), " = "),
    # Binary plus and minus after a word or ")"
    (re.compile(r"(\w)\s*\+\s*(?=\w)", _FLAGS), r"\1 + "),
    (re.compile(r"(\))\s*\+\s*(?=\w)", _FLAGS), r"\1 + "),
    (re.compile(r"(\w)\s*-\s*(?=\w)", _FLAGS), r"\1 - "),
    (re.compile(r"(\))\s*-\s*(?=\w)", _FLAGS), r"\1 - "),
]


def starts_with_comment(content: str) -> bool:
    return content.lstrip().startswith(COMMENT_MARKERS)


def apply_keyword_spacing(code: str) -> str:
    """Put one space between a control-flow keyword and its ``(``.

    Keywords only match on word boundaries, so ``verify(x)`` stays untouched.

    Examples:
        apply_keyword_spacing("if(x)")  # "if (x)"
        apply_keyword_spacing("foreach(var y in z)")  # "foreach (var y in z)"
    """
    for pattern in KEYWORD_PATTERNS:
        code = pattern.sub(r"\1 (", code)
    return code


def apply_operator_spacing(code: str) -> str:
    """Normalize spacing around binary and compound operators.

    Patterns only fire when word characters (or ``)`` for ``+``, ``-`` and
    ``=>``) touch the operator, which leaves unary signs and generic type
    arguments alone. Content starting with ``//`` or ``/*`` is returned as is.

    Examples:
        apply_operator_spacing("a==b")  # "a == b"
        apply_operator_spacing("x=1")  # "x = 1"
        apply_operator_spacing("a&& b")  # "a && b"
    """
    if starts_with_comment(code):
        return code

    for pattern, replacement in OPERATOR_REPAIRS:
        code = pattern.sub(replacement, code)
    for pattern, replacement in OPERATOR_RULES:
        code = pattern.sub(replacement, code)
    return code


def split_segments(content: str, code_spans: list[tuple[int, int]]) -> list[tuple[bool, str]]:
    """Cut `content` into consecutive code and literal pieces.

    Args:
        content: Line content.
        code_spans: Sorted, non-overlapping ``(start, end)`` code ranges.

    Returns:
        list[tuple[bool, str]]: ``(is_code, text)`` pieces that join back to
            `content`.

    Examples:
        split_segments('s="a==b";', [(0, 2), (8, 9)])
        # [(True, 's='), (False, '"a==b"'), (True, ';')]
    """
    segments: list[tuple[bool, str]] = []
    offset = 0

    for start, end in code_spans:
        if start > offset:
            segments.append((False, content[offset:start]))
        segments.append((True, content[start:end]))
        offset = end

    if offset < len(content):
        segments.append((False, content[offset:]))

    return segments


def format_line_content(
    content: str,
    config: FormatterConfig,
    code_spans: list[tuple[int, int]] | None = None,
) -> str:
    """Apply the enabled spacing passes to the code parts of one line.

    Args:
        content: Trimmed line content.
        config: Formatting options; only the spacing flags are read.
        code_spans: Code ranges of `content`; the whole content counts as code
            when omitted.

    Returns:
        str: Rewritten content. String, character and comment text is kept
            byte for byte.

    Examples:
        format_line_content('if(x=="a"){', FormatterConfig(), [(0, 6), (9, 11)])
        # 'if (x=="a"){'
    """
    run_keywords = config.keyword_spacing
    run_operators = config.operator_spacing and not starts_with_comment(content)
    if not (run_keywords or run_operators):
        return content

    if code_spans is None:
        code_spans = [(0, len(content))]
    pieces: list[str] = []
    for is_code, text in split_segments(content, code_spans):
        if is_code and run_keywords:
            text = apply_keyword_spacing(text)
        if is_code and run_operators:
            text = apply_operator_spacing(text)
        pieces.append(text)

    return "".join(pieces)
