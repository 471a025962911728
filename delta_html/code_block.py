"""Preformatted code block accumulation."""

from __future__ import annotations

from .constants import CODE_ESCAPES
from .models import CodeBlock
from .tokens import render_template


def escape_code(text: str) -> str:
    """Escape text for a preformatted block.

    Only spaces and angle brackets are replaced; ampersands pass through.

    Examples:
        escape_code("<a> <b>")  # "&lt;a&gt;&nbsp;&lt;b&gt;"
    """
    for character, entity in CODE_ESCAPES:
        text = text.replace(character, entity)
    return text


def add_code_line(block: CodeBlock, content: str, line_count: int = 1) -> None:
    """Escape one line of code and add it, with its newlines, to `block`."""
    block.chunks.append(escape_code(content) + "\n" * line_count)


def render_code_block(block: CodeBlock, tokens: dict) -> str:
    return render_template(tokens["code-block"], content="".join(block.chunks))
