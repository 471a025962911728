"""
delta-html: render Quill-style rich-text deltas to HTML and plain text.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    delta-html post.json

Library Usage:
    from delta_html import DeltaRenderer

    delta = {"ops": [{"insert": "Hello", "attributes": {"bold": True}}, {"insert": "\\n"}]}
    renderer = DeltaRenderer(delta).parse()
    html = renderer.to_html()
    text = renderer.to_plain_text()
"""

from .config import ConfigError, RenderConfig, build_config, load_config
from .engine import DeltaRenderer, delta_to_html, delta_to_plain_text
from .exceptions import (
    DeltaError,
    FormatError,
    InvalidAttributeError,
    MalformedOperationError,
    UnsupportedDeltaTypeError,
)
from .plaintext import strip_tags
from .tokens import merge_tokens

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "DeltaRenderer",
    "delta_to_html",
    "delta_to_plain_text",
    # Configuration
    "RenderConfig",
    "build_config",
    "load_config",
    "merge_tokens",
    # Utilities
    "strip_tags",
    # Exceptions
    "ConfigError",
    "DeltaError",
    "FormatError",
    "InvalidAttributeError",
    "MalformedOperationError",
    "UnsupportedDeltaTypeError",
    # Version
    "__version__",
]
