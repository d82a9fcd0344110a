"""
Re-indents C# source files and normalizes keyword and operator spacing.
Files are rewritten in place only when formatting changes them.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from .config import ConfigError, build_config
from .exceptions import FormatFileError
from .filesystem import resolve_source, size_limit_from_env, write_source
from .formatter import format_file

__all__ = ["cli"]

LOG_LEVEL_ENV_VAR = "GENTLE_FORMAT_LOG_LEVEL"
LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _configure_logging(log_level: str) -> None:
    """Route package log records to stderr at the requested level."""
    package_logger = logging.getLogger("gentle_format")
    package_logger.setLevel(LOG_LEVELS.get(log_level.lower(), logging.WARNING))

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))
        package_logger.addHandler(handler)
        package_logger.propagate = False


@click.command()
@click.version_option(package_name="gentle-format")
@click.option("--check", is_flag=True, help="Report files that would change; write nothing")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print formatted text instead of writing")
@click.option("--brace-style", type=click.Choice(["allman", "kr"]), help="Brace style")
@click.option(
    "--operator-spacing/--no-operator-spacing",
    default=None,
    help="Normalize spaces around operators",
)
@click.option(
    "--keyword-spacing/--no-keyword-spacing",
    default=None,
    help="Put a space between control-flow keywords and '('",
)
@click.option("--disable", is_flag=True, help="Disable formatting")
@click.option(
    "--log-level",
    type=click.Choice(list(LOG_LEVELS), case_sensitive=False),
    envvar=LOG_LEVEL_ENV_VAR,
    default="warning",
    show_default=True,
    help="Logging level",
)
@click.argument("filepaths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
def cli(
    filepaths: tuple[str, ...],
    check: bool = False,
    to_stdout: bool = False,
    brace_style: str | None = None,
    operator_spacing: bool | None = None,
    keyword_spacing: bool | None = None,
    disable: bool = False,
    log_level: str = "warning",
):
    """
    Entry point for formatting C# source files.

    Args:
        filepaths: Paths to the source files to format.
        check: Report files that would be reformatted and exit with status 1
            when there is at least one.
        to_stdout: Print the formatted text instead of rewriting the file.
        brace_style: Override for the brace style.
        operator_spacing: Override for operator spacing.
        keyword_spacing: Override for keyword spacing.
        disable: Turn formatting off regardless of configuration files.
        log_level: Logging level for package log records.

    Returns:
        None.

    Raises:
        click.BadParameter: If a path is invalid or configuration values are
            unsupported.
        click.ClickException: If a file cannot be read, is too large, or
            changes while being formatted.

    Examples:
        gentle-format src/Program.cs --no-operator-spacing
        gentle-format --check src/*.cs
    """
    _configure_logging(log_level)

    base_dir = Path.cwd().resolve()
    needs_formatting: list[str] = []

    for raw_path in filepaths:
        try:
            filepath = resolve_source(raw_path, base_dir)
        except ValueError as error:
            raise click.BadParameter(str(error)) from error
        try:
            config = build_config(
                filepath.parent,
                enabled=False if disable else None,
                brace_style=brace_style,
                operator_spacing=operator_spacing,
                keyword_spacing=keyword_spacing,
            )
        except ConfigError as error:
            raise click.BadParameter(str(error)) from error

        if not config.enabled:
            click.echo(f"Formatting is disabled; skipping {raw_path}", err=True)
            continue

        try:
            max_file_size = size_limit_from_env(default=config.max_file_size)
        except ValueError as error:
            raise click.ClickException(str(error)) from error

        try:
            result = format_file(filepath, config, max_file_size)
        except FormatFileError as error:
            raise click.ClickException(str(error)) from error

        if to_stdout:
            click.echo(result.formatted, nl=False)
            continue

        if not result.changed:
            click.echo(f"{raw_path}: already formatted")
            continue

        if check:
            needs_formatting.append(raw_path)
            click.echo(f"{raw_path}: would be formatted")
            continue

        try:
            write_source(
                filepath,
                result.formatted,
                result.source_stat,
                warn=lambda message: click.echo(message, err=True),
            )
        except FormatFileError as error:
            raise click.ClickException(str(error)) from error
        click.echo(f"{raw_path}: formatted")

    if needs_formatting:
        sys.exit(1)


if __name__ == "__main__":
    cli()
