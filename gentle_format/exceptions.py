"""Package-specific exception types."""

from __future__ import annotations

from pathlib import Path


class FormatFileError(Exception):
    """Raised when a source file cannot be read or formatted.

    The formatting core itself never raises; this covers the file layer.
    """


class FileTooLargeError(FormatFileError):
    """Raised when a file exceeds the configured size limit.

    Args:
        filepath: Path to the offending file.
        max_file_size: Maximum allowed size in bytes.
    """

    def __init__(self, filepath: Path, max_file_size: int):
        self.filepath = filepath
        self.max_file_size = max_file_size
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"{self.filepath} exceeds the maximum allowed size of {self.max_file_size} bytes."
