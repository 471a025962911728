"""Token table handling: merging overrides and filling templates."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .constants import DEFAULT_TOKENS, NESTED_TOKEN_KEYS, PLACEHOLDER_PATTERN

CONTENT_PLACEHOLDER = "{content}"


def merge_tokens(overrides: Mapping[str, object] | None = None) -> dict[str, object]:
    """Build a private token table from the defaults and optional overrides.

    Overrides replace defaults key by key. The nested ``script`` and ``list``
    tables merge one level deep, and a ``header`` override replaces only the
    levels it provides, either as a sequence indexed by level (index 0 unused)
    or as a mapping of level to template.

    Args:
        overrides: Partial token table, usually validated by
            `delta_html.config.validate_config` beforehand.

    Returns:
        dict[str, object]: A fresh table that shares no mutable state with the
            defaults or with other tables.

    Examples:
        merge_tokens({"bold": "<strong>{content}</strong>"})["bold"]
        merge_tokens({"list": {"item": "<li class='x'>{content}</li>"}})
    """
    tokens: dict[str, object] = {
        "script": dict(DEFAULT_TOKENS["script"]),
        "list": dict(DEFAULT_TOKENS["list"]),
        "header": list(DEFAULT_TOKENS["header"]),
    }
    for key, value in DEFAULT_TOKENS.items():
        tokens.setdefault(key, value)

    for key, value in (overrides or {}).items():
        if key in NESTED_TOKEN_KEYS:
            tokens[key].update(value)
        elif key == "header":
            tokens["header"] = _merge_headers(tokens["header"], value)
        else:
            tokens[key] = value

    return tokens


def _merge_headers(headers: list[str], override: Mapping | Sequence) -> list[str]:
    merged = list(headers)
    levels = override.items() if isinstance(override, Mapping) else enumerate(override)
    for level, template in levels:
        level = int(level)
        # Index 0 is a placeholder so levels line up with list positions.
        if level == 0:
            continue
        merged[level] = template
    return merged


def render_template(template: str, **values: object) -> str:
    """Substitute ``{name}`` placeholders in a single pass.

    Placeholders without a matching value are left untouched, and text
    coming from a substituted value is never expanded again.

    Examples:
        render_template('<a href="{value}">{content}</a>', content="x", value="/")
    """

    def substitute(match):
        name = match.group(1)
        if name not in values:
            return match.group(0)
        return str(values[name])

    return PLACEHOLDER_PATTERN.sub(substitute, template)


def split_template(template: str) -> tuple[str, str]:
    """Return the text before and after ``{content}`` in a template."""
    prefix, _, suffix = template.partition(CONTENT_PLACEHOLDER)
    return prefix, suffix
