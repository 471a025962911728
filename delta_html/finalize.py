"""Line finalization: render buffered lines and join them into one document."""

from __future__ import annotations

from collections.abc import Iterable

from .code_block import render_code_block
from .lists import render_list
from .models import CodeBlock, Line, ListNode
from .tokens import render_template, split_template


def render_line(line: Line, tokens: dict) -> list[str]:
    """Render one buffered line to HTML fragments.

    Block lines render their list or code block; text still pending on a
    block line at the end of the document comes out as a line of its own.
    """
    if line.block is None:
        return [line.content]

    if isinstance(line.block, ListNode):
        html = render_list(line.block, tokens)
    elif isinstance(line.block, CodeBlock):
        html = render_code_block(line.block, tokens)
    else:
        raise TypeError(f"Unsupported block type: {type(line.block).__name__}")

    return [html, line.content] if line.content else [html]


def block_prefixes(tokens: dict) -> tuple[str, ...]:
    """Opening text of the list and code-block templates."""
    templates = (
        tokens["list"]["ordered"],
        tokens["list"]["unordered"],
        tokens["code-block"],
    )
    prefixes = (split_template(template)[0] for template in templates)
    return tuple(prefix for prefix in prefixes if prefix)


def finalize_lines(lines: Iterable[Line], tokens: dict, wrap_lines: bool = True) -> str:
    """Join rendered lines, wrapping each one in the ``line`` template.

    Lines that open with a list or code-block template are block-level
    containers already and are emitted as they are. Nothing in `lines` is
    modified, so repeated calls return identical output.

    Args:
        lines: Buffered lines, in order.
        tokens: Token table of the renderer.
        wrap_lines: Disable to emit every line unwrapped.

    Returns:
        str: The concatenated HTML, with no separator between lines.

    Examples:
        finalize_lines([Line("Hello")], merge_tokens())  # '<div id="line-1">Hello</div>'
    """
    rendered = [html for line in lines for html in render_line(line, tokens)]
    if not wrap_lines:
        return "".join(rendered)

    prefixes = block_prefixes(tokens)
    parts = []
    for number, html in enumerate(rendered, start=1):
        if prefixes and html.startswith(prefixes):
            parts.append(html)
        else:
            parts.append(render_template(tokens["line"], number=number, content=html))
    return "".join(parts)
