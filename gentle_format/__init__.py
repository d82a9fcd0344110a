"""
gentle-format: indentation and spacing formatter for C# source code.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    gentle-format src/Program.cs

Library Usage:
    from gentle_format import FormatterConfig, format_document

    formatted = format_document(text, FormatterConfig(operator_spacing=False))
    if formatted != text:
        ...
"""

from .config import ConfigError, FormatterConfig
from .detect import detect_indent_style, detect_line_ending
from .exceptions import FileTooLargeError, FormatFileError
from .formatter import format_document, format_file
from .models import FormatResult, LexicalContext, LineScan
from .rewriter import apply_keyword_spacing, apply_operator_spacing
from .scanner import context_after_line, scan_line, update_depth

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "format_document",
    "format_file",
    "scan_line",
    "context_after_line",
    "update_depth",
    "apply_keyword_spacing",
    "apply_operator_spacing",
    "detect_line_ending",
    "detect_indent_style",
    # Data models
    "FormatterConfig",
    "FormatResult",
    "LexicalContext",
    "LineScan",
    # Exceptions
    "ConfigError",
    "FileTooLargeError",
    "FormatFileError",
    # Version
    "__version__",
]
