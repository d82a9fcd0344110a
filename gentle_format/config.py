"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib

from .constants import BRACE_STYLE_ALIASES, BRACE_STYLES, DEFAULT_MAX_FILE_SIZE


@dataclass(frozen=True)
class FormatterConfig:
    """Options for formatting brace-delimited source code.

    Attributes:
        enabled: When False, formatting returns the input unchanged.
        brace_style: ``"allman"`` or ``"kr"`` (aliases ``"k&r"``/``"1tbs"``).
            Accepted and validated, but brace placement is never changed.
        operator_spacing: Whether to normalize spaces around operators.
        keyword_spacing: Whether to put a space between control-flow keywords
            and their opening parenthesis.
        max_file_size: Maximum file size in bytes that will be processed.

    Examples:
        FormatterConfig(operator_spacing=False, brace_style="kr")
    """

    enabled: bool = True
    brace_style: str = "allman"
    operator_spacing: bool = True
    keyword_spacing: bool = True

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`brace_style` must be one of: allman, kr")
    """


# Candidate files per directory, in lookup order, with the tables read from each.
CONFIG_SOURCES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("pyproject.toml", (("tool", "gentle-format"),)),
    (".gentle-format.toml", (("gentle-format",), ("tool", "gentle-format"))),
)


def load_config(search_path: Path) -> FormatterConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.gentle-format]`` table from `pyproject.toml` and the
    ``[gentle-format]`` or ``[tool.gentle-format]`` table from
    `.gentle-format.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        FormatterConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("src"))
    """
    start = search_path.resolve()

    for directory in (start, *start.parents):
        for filename, table_paths in CONFIG_SOURCES:
            config = _load_from_file(directory / filename, table_paths)
            if config is not None:
                return normalize_config(config)

    return FormatterConfig()


_MISSING = object()


def _read_toml(config_file: Path) -> dict | None:
    if not config_file.is_file():
        return None
    try:
        return tomllib.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None


def _load_from_file(
    config_file: Path, table_paths: tuple[tuple[str, ...], ...]
) -> FormatterConfig | None:
    data = _read_toml(config_file)
    if data is None:
        return None

    for table_path in table_paths:
        table = _lookup_table(data, table_path)
        if table is not _MISSING:
            return _config_from_table(table, config_file, table_path)

    return None


def _lookup_table(data: object, table_path: tuple[str, ...]) -> object:
    for key in table_path:
        if not isinstance(data, dict) or key not in data:
            return _MISSING
        data = data[key]
    return data


def _config_from_table(
    table: object, config_file: Path, table_path: tuple[str, ...]
) -> FormatterConfig:
    table_name = ".".join(table_path)

    if not isinstance(table, dict):
        raise ConfigError(
            f"{config_file}: `{table_name}` must be a table, got {type(table).__name__}"
        )

    # Keys may be written in kebab-case, as is common in TOML tables.
    options = {key.replace("-", "_"): value for key, value in table.items()}
    unknown = sorted(set(options) - {option.name for option in fields(FormatterConfig)})
    if unknown:
        raise ConfigError(
            f"{config_file}: unknown option(s) in `[{table_name}]`: {', '.join(unknown)}"
        )

    return FormatterConfig(**options)


def normalize_config(config: FormatterConfig) -> FormatterConfig:
    """Resolve brace style aliases and letter case."""
    brace_style = config.brace_style
    if isinstance(brace_style, str):
        brace_style = brace_style.strip().lower()
        brace_style = BRACE_STYLE_ALIASES.get(brace_style, brace_style)

    if brace_style == config.brace_style:
        return config
    return replace(config, brace_style=brace_style)


def validate_config(config: FormatterConfig) -> None:
    """Validate a `FormatterConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If a flag is not a boolean, the brace style is unsupported,
            or the file size limit is not a positive integer.

    Examples:
        validate_config(FormatterConfig(brace_style="K&R"))
    """
    config = normalize_config(config)

    for name in ("enabled", "operator_spacing", "keyword_spacing"):
        if not isinstance(getattr(config, name), bool):
            raise ConfigError(f"`{name}` must be a boolean")

    if config.brace_style not in BRACE_STYLES:
        raise ConfigError(
            f"`brace_style` must be one of: {', '.join(BRACE_STYLES + tuple(BRACE_STYLE_ALIASES))}"
        )

    _ensure_integers({"max_file_size": config.max_file_size})
    _ensure_positive({"max_file_size": config.max_file_size})


def apply_overrides(config: FormatterConfig, **overrides: object) -> FormatterConfig:
    """Apply override values to a `FormatterConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        FormatterConfig: New configuration with the provided overrides applied.
        The original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `FormatterConfig`.

    Examples:
        updated = apply_overrides(config, operator_spacing=False, brace_style=None)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> FormatterConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        FormatterConfig: Validated configuration ready for formatting.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), keyword_spacing=False)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
