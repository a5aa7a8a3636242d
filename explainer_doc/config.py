"""Configuration loading and management."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from .constants import (
    DEFAULT_HIGHLIGHT_SECONDS,
    DEFAULT_INDEX_MAX_LEVEL,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_SCROLL_OFFSET,
    DEFAULT_SECTIONS,
)
from .models import SectionKey


@dataclass
class ViewerConfig:
    """Configuration for parsing, indexing and navigating documents.

    Attributes:
        scroll_offset: Negative offset carried by scroll signals, leaving
            room for a fixed overlay header.
        highlight_seconds: Lifetime of the transient navigation highlight.
        index_max_level: Deepest heading rank considered by the section index.
        toc_min_level: Smallest heading level included in generated TOCs.
        toc_max_level: Largest heading level included in generated TOCs.
        preserve_unicode: Whether to keep Unicode characters in heading ids.
        max_file_size: Maximum document size in bytes read from disk.
        sections: Optional replacement for the default section taxonomy, as a
            list of ``{key, label, keywords}`` tables.

    Examples:
        ViewerConfig(scroll_offset=-120, highlight_seconds=1.5)
    """

    # Navigation
    scroll_offset: int = DEFAULT_SCROLL_OFFSET
    highlight_seconds: float = DEFAULT_HIGHLIGHT_SECONDS
    index_max_level: int = DEFAULT_INDEX_MAX_LEVEL

    # TOC
    toc_min_level: int = 1
    toc_max_level: int = 3

    # Slugs
    preserve_unicode: bool = False

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    # Taxonomy
    sections: list[dict] | None = None


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`toc_max_level` must be >= `toc_min_level`")
    """


def load_config(search_path: Path) -> ViewerConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.explainer-doc]`` table from `pyproject.toml` and the
    ``[explainer-doc]`` or ``[tool.explainer-doc]`` table from
    `.explainer-doc.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        ViewerConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a table is present but is not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "explainer-doc")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".explainer-doc.toml",
            table_paths=[("explainer-doc",), ("tool", "explainer-doc")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return ViewerConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> ViewerConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> ViewerConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return ViewerConfig()

    try:
        return ViewerConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def section_keys(config: ViewerConfig) -> tuple[SectionKey, ...]:
    """Build the section taxonomy described by a configuration.

    Args:
        config: Configuration whose `sections` entries should be converted.

    Returns:
        tuple[SectionKey, ...]: The configured taxonomy, or the default one
            when `sections` is unset.

    Raises:
        ConfigError: If an entry lacks a key or has malformed fields.

    Examples:
        section_keys(ViewerConfig(sections=[{"key": "faq", "label": "FAQ"}]))
    """
    if config.sections is None:
        return DEFAULT_SECTIONS

    if not isinstance(config.sections, list):
        raise ConfigError("`sections` must be a list of tables")

    keys = []
    seen: set[str] = set()
    for entry in config.sections:
        if not isinstance(entry, dict) or not isinstance(entry.get("key"), str) or not entry["key"]:
            raise ConfigError("each `sections` entry needs a non-empty `key`")
        key = entry["key"]
        if key in seen:
            raise ConfigError(f"duplicate section key `{key}`")
        seen.add(key)

        label = entry.get("label", key.replace("-", " ").title())
        keywords = entry.get("keywords", [label])
        if not isinstance(label, str) or not label.strip():
            raise ConfigError(f"section `{key}` has an invalid `label`")
        if not isinstance(keywords, list) or not all(
            isinstance(keyword, str) and keyword.strip() for keyword in keywords
        ):
            raise ConfigError(f"section `{key}` needs `keywords` as a list of strings")

        keys.append(SectionKey(key, label, tuple(keyword.lower() for keyword in keywords)))

    return tuple(keys)


def validate_config(config: ViewerConfig) -> None:
    """Validate a `ViewerConfig` instance.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If levels are inconsistent, numeric values are out of
            range, or the section taxonomy is malformed.

    Examples:
        validate_config(ViewerConfig(index_max_level=3))
    """
    _ensure_integers(
        {
            "scroll_offset": config.scroll_offset,
            "index_max_level": config.index_max_level,
            "toc_min_level": config.toc_min_level,
            "toc_max_level": config.toc_max_level,
            "max_file_size": config.max_file_size,
        }
    )

    if config.scroll_offset >= 0:
        raise ConfigError("`scroll_offset` must be negative")
    if isinstance(config.highlight_seconds, bool) or not isinstance(
        config.highlight_seconds, (int, float)
    ):
        raise ConfigError("`highlight_seconds` must be a number")
    if config.highlight_seconds <= 0:
        raise ConfigError("`highlight_seconds` must be positive")

    if not 1 <= config.index_max_level <= 6:
        raise ConfigError("`index_max_level` must be between 1 and 6")
    if config.toc_min_level < 1:
        raise ConfigError("`toc_min_level` must be >= 1")
    if config.toc_max_level < config.toc_min_level:
        raise ConfigError("`toc_max_level` must be >= `toc_min_level`")
    if config.toc_max_level > 6:
        raise ConfigError("`toc_max_level` must be <= 6")

    if not isinstance(config.preserve_unicode, bool):
        raise ConfigError("`preserve_unicode` must be a boolean")
    if config.max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")

    section_keys(config)


def apply_overrides(config: ViewerConfig, **overrides: object) -> ViewerConfig:
    """Apply override values to a `ViewerConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        ViewerConfig: New configuration with the provided overrides applied.

    Raises:
        TypeError: If an override name is not defined on `ViewerConfig`.

    Examples:
        updated = apply_overrides(config, scroll_offset=-40)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> ViewerConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        ViewerConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), highlight_seconds=3.0)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
