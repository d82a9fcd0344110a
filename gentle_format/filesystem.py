"""Reading and rewriting C# source files on disk."""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, SOURCE_EXTENSIONS
from .exceptions import FileTooLargeError, FormatFileError

MAX_FILE_SIZE_ENV_VAR = "GENTLE_FORMAT_MAX_FILE_SIZE"

logger = logging.getLogger(__name__)


def size_limit_from_env(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the size limit from ``GENTLE_FORMAT_MAX_FILE_SIZE``, or `default`.

    An unset or blank variable falls back to `default`.

    Raises:
        ValueError: If the variable holds anything but a positive integer.
    """
    raw_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR, "").strip()
    if not raw_value:
        return default

    try:
        limit = int(raw_value)
    except ValueError:
        limit = 0
    if limit <= 0:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {raw_value!r}")
    return limit


def find_symlink(path: Path) -> Path | None:
    """Return the first symlink among `path` and its parents, if any."""
    for candidate in (path, *path.parents):
        if os.path.islink(candidate):
            return candidate
    return None


def resolve_source(raw_path: str, base_dir: Path) -> Path:
    """Turn a command-line argument into an absolute source file path.

    The path may not pass through a symlink, must exist below `base_dir` and
    must carry a C# extension. Whether it is a regular file is checked when
    it is read.

    Raises:
        ValueError: Naming the argument and the failed check.

    Examples:
        resolve_source("src/Program.cs", Path.cwd())
    """
    path = Path(raw_path).expanduser()

    link = find_symlink(path)
    if link is not None:
        raise ValueError(f"{raw_path}: refusing to follow symlink {link}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{raw_path}: no such file") from error
    except OSError as error:
        raise ValueError(f"{raw_path}: cannot resolve path ({error})") from error

    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{raw_path}: outside the working directory {base_dir}")

    if resolved.suffix.lower() not in SOURCE_EXTENSIONS:
        expected = ", ".join(SOURCE_EXTENSIONS)
        raise ValueError(f"{raw_path}: not a C# source file (expected {expected})")

    return resolved


def read_source(filepath: Path, max_size: int) -> tuple[str, os.stat_result]:
    """Read a source file exactly as stored.

    The file is stat-ed without following links before it is opened, so
    symlinks, pipes and devices are rejected without blocking on them. The text
    keeps its line endings.

    Args:
        filepath: File to read.
        max_size: Largest accepted size in bytes.

    Returns:
        tuple[str, os.stat_result]: The text and the stat taken before reading,
            which `write_source` compares against before replacing the file.

    Raises:
        FileTooLargeError: If the file is larger than `max_size`.
        FormatFileError: If the file is missing, not a regular file,
            unreadable, or not valid UTF-8.

    Examples:
        text, snapshot = read_source(Path("Program.cs"), 1024 * 1024)
    """
    try:
        snapshot = os.lstat(filepath)
    except OSError as error:
        raise FormatFileError(f"{filepath}: cannot access file ({error})") from error

    if not stat.S_ISREG(snapshot.st_mode):
        raise FormatFileError(f"{filepath}: not a regular file")
    if snapshot.st_size > max_size:
        raise FileTooLargeError(filepath, max_size)

    try:
        with open(filepath, encoding="utf-8", newline="") as handle:
            text = handle.read()
    except UnicodeDecodeError as error:
        raise FormatFileError(f"{filepath}: invalid UTF-8 at byte {error.start}") from error
    except OSError as error:
        raise FormatFileError(f"{filepath}: cannot read file ({error})") from error

    logger.debug("Read %s (%d bytes)", filepath, snapshot.st_size)
    return text, snapshot


def _fingerprint(snapshot: os.stat_result) -> tuple[int, int, int, int]:
    return (snapshot.st_ino, snapshot.st_dev, snapshot.st_size, snapshot.st_mtime_ns)


def write_source(
    filepath: Path,
    content: str,
    snapshot: os.stat_result,
    warn: Callable[[str], None] | None = None,
):
    """Replace `filepath` with `content` in one atomic step.

    The text goes to a hidden temporary file next to the target, which gets the
    original permission bits (and owner, where allowed) before it is renamed
    over the target. Line endings are written as given.

    Args:
        filepath: File to replace.
        content: Formatted text.
        snapshot: Stat returned by `read_source`; the file is left alone when
            it no longer matches.
        warn: Receives non-fatal messages, such as a failed ownership copy.

    Raises:
        FormatFileError: If the file changed since it was read or could not be
            replaced.
    """
    try:
        current = os.lstat(filepath)
    except OSError as error:
        raise FormatFileError(f"{filepath}: cannot access file ({error})") from error
    if _fingerprint(current) != _fingerprint(snapshot):
        raise FormatFileError(f"{filepath}: changed during processing; refusing to overwrite")

    fd, temp_name = tempfile.mkstemp(
        prefix=f".{filepath.name}.", suffix=".tmp", dir=filepath.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(temp_name, stat.S_IMODE(snapshot.st_mode))
        if hasattr(os, "chown"):
            try:
                os.chown(temp_name, snapshot.st_uid, snapshot.st_gid)
            except PermissionError:
                if warn is not None:
                    warn(f"Warning: could not keep the owner of {filepath.name}")
        os.replace(temp_name, filepath)
    except OSError as error:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(temp_name)
        raise FormatFileError(f"{filepath}: cannot write file ({error})") from error

    logger.debug("Rewrote %s (%d characters)", filepath, len(content))
