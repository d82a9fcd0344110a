"""Constants used across the gentle-format package."""

from __future__ import annotations

# Line endings
LF = "\n"
CRLF = "\r\n"

# Indent units
TAB_INDENT = "\t"
SPACE_INDENT = "    "

# Control-flow keywords that get a space before their opening parenthesis
SPACED_KEYWORDS = (
    "if",
    "for",
    "foreach",
    "while",
    "switch",
    "catch",
    "using",
    "lock",
    "fixed",
)

# Content starting with one of these is never operator-spaced
COMMENT_MARKERS = ("//", "/*")

# Brace styles
BRACE_STYLES = ("allman", "kr")
BRACE_STYLE_ALIASES = {"k&r": "kr", "1tbs": "kr"}

# Files and limits
SOURCE_EXTENSIONS = (".cs", ".csx")
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

# Whitespace trimmed from both ends of a line before it is re-indented
LINE_TRIM_CHARS = (
    " \t\n\v\f\r"
    "\u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)
