"""Constants used across the delta-html package."""

from __future__ import annotations

import re
from types import MappingProxyType

# Default HTML templates, keyed by markup kind.
DEFAULT_TOKENS = MappingProxyType(
    {
        "line": '<div id="line-{number}">{content}</div>',
        "bold": "<b>{content}</b>",
        "italic": "<i>{content}</i>",
        "strike": "<s>{content}</s>",
        "underline": "<u>{content}</u>",
        "script": MappingProxyType(
            {
                "sub": "<sub>{content}</sub>",
                "super": "<sup>{content}</sup>",
            }
        ),
        "list": MappingProxyType(
            {
                "ordered": "<ol>{content}</ol>",
                "unordered": "<ul>{content}</ul>",
                "item": "<li>{content}</li>",
            }
        ),
        "header": (
            "",
            "<h1>{content}</h1>",
            "<h2>{content}</h2>",
            "<h3>{content}</h3>",
            "<h4>{content}</h4>",
            "<h5>{content}</h5>",
            "<h6>{content}</h6>",
        ),
        "link": '<a href="{value}">{content}</a>',
        "image": '<img src="{image}" alt="{alt}" />',
        "formula": '<span class="katex-formula" data-formula="{formula}">{formula}</span>',
        "blockquote": "<blockquote>{content}</blockquote>",
        "code-block": '<pre class="hljs">{content}</pre>',
    }
)

NESTED_TOKEN_KEYS = ("script", "list")
MAX_HEADER_LEVEL = 6

# Inline attributes in application order: the first one wraps innermost.
INLINE_ATTRIBUTE_ORDER = (
    "bold",
    "italic",
    "strike",
    "underline",
    "script",
    "link",
    "blockquote",
    "header",
)

# Accepted `list` attribute values and the token each one renders with.
LIST_KINDS = MappingProxyType(
    {
        "ordered": "ordered",
        "unordered": "unordered",
        "bullet": "unordered",
    }
)

# Delta patterns
NEWLINE_RUN_PATTERN = re.compile(r"\n+")
# Pre-decoded content sometimes ends with a literal backslash-n pair.
ESCAPED_NEWLINE_PATTERN = re.compile(r".+\\n")
PLACEHOLDER_PATTERN = re.compile(r"\{([a-z]+)\}")

# Code-block escaping, applied in order
CODE_ESCAPES = (
    (" ", "&nbsp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)

# Input limits
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DELTA_EXTENSIONS = (".json", ".delta")
