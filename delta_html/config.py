"""Rendering configuration: defaults, config files and overrides."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_MAX_FILE_SIZE, DEFAULT_TOKENS, MAX_HEADER_LEVEL, NESTED_TOKEN_KEYS

# Config files looked up in each directory, in order, with the tables they may hold.
CONFIG_SOURCES = (
    ("pyproject.toml", (("tool", "delta-html"),)),
    (".delta-html.toml", (("delta-html",), ("tool", "delta-html"))),
)


@dataclass
class RenderConfig:
    """Configuration for rendering deltas to HTML.

    Attributes:
        tokens: Partial token table overriding the default templates.
        wrap_lines: Whether lines outside lists and code blocks are wrapped
            in the ``line`` template.
        strict: Whether malformed attribute values raise
            `InvalidAttributeError` (True) or are skipped with a warning.
        max_file_size: Maximum size in bytes of a delta file read by the CLI.

    Examples:
        RenderConfig(tokens={"bold": "<strong>{content}</strong>"}, wrap_lines=False)
    """

    tokens: dict | None = None

    # Rendering
    wrap_lines: bool = True
    strict: bool = True

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """A configuration file or override holds an unusable value.

    Examples:
        raise ConfigError("`wrap_lines` must be a boolean")
    """


def load_config(search_path: Path) -> RenderConfig:
    """Find and read the configuration that applies to `search_path`.

    Each directory from `search_path` up to the filesystem root is checked
    for a ``[tool.delta-html]`` table in ``pyproject.toml``, then for a
    ``[delta-html]`` (or ``[tool.delta-html]``) table in ``.delta-html.toml``.
    The first table found wins, even an empty one. Files that cannot be read
    or are not valid TOML are passed over.

    Args:
        search_path: Directory the lookup starts from, usually the one holding
            the delta file.

    Returns:
        RenderConfig: The configuration from the first table found, or the
            defaults when there is none.

    Raises:
        ConfigError: If the table found is not a table or has unknown keys.

    Examples:
        load_config(Path("posts"))
    """
    found = next(_find_tables(search_path.resolve()), None)
    if found is None:
        return RenderConfig()
    config_file, table = found
    return _config_from_table(table, config_file)


_MISSING = object()


def _find_tables(start: Path) -> Iterator[tuple[Path, object]]:
    for directory in (start, *start.parents):
        for filename, table_paths in CONFIG_SOURCES:
            data = _read_toml(directory / filename)
            if data is None:
                continue
            for table_path in table_paths:
                table = _lookup(data, table_path)
                if table is not _MISSING:
                    yield directory / filename, table
                    break


def _read_toml(path: Path) -> dict | None:
    if not path.is_file():
        return None
    try:
        with path.open("rb") as stream:
            return tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None


def _lookup(data: object, keys: tuple[str, ...]) -> object:
    for key in keys:
        if not isinstance(data, dict) or key not in data:
            return _MISSING
        data = data[key]
    return data


def _config_from_table(table: object, config_file: Path) -> RenderConfig:
    if table is None or table == {}:
        return RenderConfig()
    if not isinstance(table, dict):
        raise ConfigError(f"The delta-html settings in {config_file} must be a table")

    known = {field.name for field in fields(RenderConfig)}
    unknown = sorted(set(table) - known)
    if unknown:
        raise ConfigError(f"Unknown delta-html settings in {config_file}: {', '.join(unknown)}")
    return RenderConfig(**table)


def validate_config(config: RenderConfig) -> None:
    """Validate a `RenderConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If flags are not booleans, the file size limit is not a
            positive integer, or the token overrides do not follow the token
            table schema.

    Examples:
        validate_config(RenderConfig(wrap_lines=False))
    """
    for key in ("wrap_lines", "strict"):
        if not isinstance(getattr(config, key), bool):
            raise ConfigError(f"`{key}` must be a boolean")

    max_file_size = config.max_file_size
    if isinstance(max_file_size, bool) or not isinstance(max_file_size, int):
        raise ConfigError("`max_file_size` must be an integer")
    if max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")

    if config.tokens is not None:
        validate_token_overrides(config.tokens)


def validate_token_overrides(tokens: object) -> None:
    """Check a partial token table against the default table's schema.

    Args:
        tokens: Candidate overrides.

    Raises:
        ConfigError: If a key is unknown or a template has the wrong shape.

    Examples:
        validate_token_overrides({"list": {"item": "<li>{content}</li>"}})
    """
    if not isinstance(tokens, Mapping):
        raise ConfigError("`tokens` must be a table of templates")

    for key, value in tokens.items():
        if key not in DEFAULT_TOKENS:
            raise ConfigError(f"Unknown token `{key}`")

        if key in NESTED_TOKEN_KEYS:
            if not isinstance(value, Mapping):
                raise ConfigError(f"Token `{key}` must be a table of templates")
            for variant, template in value.items():
                if variant not in DEFAULT_TOKENS[key]:
                    raise ConfigError(f"Unknown token `{key}.{variant}`")
                _ensure_template(f"{key}.{variant}", template)
        elif key == "header":
            _validate_header_tokens(value)
        else:
            _ensure_template(key, value)


def _validate_header_tokens(value: object) -> None:
    if isinstance(value, Mapping):
        levels = value.items()
    elif isinstance(value, Sequence) and not isinstance(value, str):
        if len(value) > MAX_HEADER_LEVEL + 1:
            raise ConfigError(f"Token `header` accepts at most {MAX_HEADER_LEVEL} levels")
        # Index 0 is unused, whatever it holds.
        levels = list(enumerate(value))[1:]
    else:
        raise ConfigError("Token `header` must be a list or a table of templates")

    for level, template in levels:
        try:
            number = int(level)
        except (TypeError, ValueError) as error:
            raise ConfigError(f"Invalid header level `{level}`") from error
        if not 1 <= number <= MAX_HEADER_LEVEL:
            raise ConfigError(f"Header level must be between 1 and {MAX_HEADER_LEVEL}, got {level}")
        _ensure_template(f"header.{number}", template)


def _ensure_template(name: str, template: object) -> None:
    if not isinstance(template, str):
        raise ConfigError(f"Token `{name}` must be a string")


def apply_overrides(config: RenderConfig, **overrides: object) -> RenderConfig:
    """Return `config` with command-line or caller overrides layered on top.

    Args:
        config: Configuration read from files or built by the caller.
        overrides: Field values keyed by `RenderConfig` field name. None means
            "not given" and is skipped. ``tokens`` is merged into the
            configured token overrides rather than replacing them.

    Returns:
        RenderConfig: A new configuration, or `config` itself when nothing
            was overridden.

    Raises:
        TypeError: If an override name is not a `RenderConfig` field.

    Examples:
        apply_overrides(config, strict=False, tokens={"bold": "<strong>{content}</strong>"})
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    if "tokens" in changes:
        changes["tokens"] = merge_token_overrides(config.tokens, changes["tokens"])
    return replace(config, **changes)


def merge_token_overrides(base: Mapping | None, extra: Mapping | None) -> dict | None:
    """Layer two partial token tables; nested tables merge one level deep."""
    if base is None and extra is None:
        return None

    merged: dict = {}
    for layer in (base or {}, extra or {}):
        for key, value in layer.items():
            previous = merged.get(key)
            if isinstance(previous, Mapping) and isinstance(value, Mapping):
                merged[key] = {**previous, **value}
            elif isinstance(value, Mapping):
                merged[key] = dict(value)
            else:
                merged[key] = value
    return merged


def build_config(search_path: Path, **overrides: object) -> RenderConfig:
    """Resolve the configuration for a delta file.

    Reads the nearest config table from `search_path` upwards, layers the
    overrides on top and validates the result.

    Raises:
        ConfigError: If the config file or the final values are invalid.

    Examples:
        build_config(Path("posts"), wrap_lines=False)
    """
    config = apply_overrides(load_config(search_path), **overrides)
    validate_config(config)
    return config
