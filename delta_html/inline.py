"""Inline attribute tokenizer."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from .constants import INLINE_ATTRIBUTE_ORDER, MAX_HEADER_LEVEL
from .exceptions import InvalidAttributeError
from .tokens import render_template

logger = logging.getLogger(__name__)

FLAG_ATTRIBUTES = ("bold", "italic", "strike", "underline")


def apply_inline_attributes(
    content: str, attributes: Mapping[str, object], tokens: dict, strict: bool = True
) -> str:
    """Wrap `content` in the templates of its inline attributes.

    Attributes are applied in a fixed order, innermost first: ``bold``,
    ``italic``, ``strike``, ``underline``, ``script``, ``link``,
    ``blockquote``, ``header``. Keys outside that set (``list``,
    ``code-block``, ``indent``, or anything unknown) are ignored.

    Args:
        content: Text or HTML fragment to wrap.
        attributes: Attribute mapping of the operation.
        tokens: Token table of the renderer.
        strict: Raise on malformed values instead of skipping them.

    Returns:
        str: The wrapped fragment.

    Raises:
        InvalidAttributeError: If `strict` is set and an attribute value is
            outside its domain.

    Examples:
        apply_inline_attributes("Hello", {"bold": True, "underline": True}, tokens)
        # "<u><b>Hello</b></u>"
    """
    html = content
    for name in INLINE_ATTRIBUTE_ORDER:
        if name not in attributes:
            continue
        try:
            html = _wrap(name, attributes[name], html, tokens)
        except InvalidAttributeError as error:
            if strict:
                raise
            logger.warning("Skipping attribute: %s", error)
    return html


def _wrap(name: str, value: object, html: str, tokens: dict) -> str:
    if name in FLAG_ATTRIBUTES:
        if not value:
            return html
        return render_template(tokens[name], content=html)

    if name == "link":
        if not isinstance(value, str):
            raise InvalidAttributeError(name, value)
        return render_template(tokens["link"], content=html, value=value)

    if name == "header":
        level = header_level(value)
        if level is None:
            return html
        return render_template(tokens["header"][level], content=html)

    if name == "blockquote":
        return render_template(tokens["blockquote"], content=html)

    if name == "script":
        if not isinstance(value, str) or value not in tokens["script"]:
            raise InvalidAttributeError(name, value)
        return render_template(tokens["script"][value], content=html)

    return html


def header_level(value: object) -> int | None:
    """Validate a ``header`` attribute value.

    Returns:
        int | None: The level, or None for ``0``, ``False`` and ``None``,
            which leave the content unwrapped.

    Raises:
        InvalidAttributeError: If the value is not an integer from 1 to 6.
    """
    if value is None or value is False or value == 0:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAttributeError("header", value)
    if not 1 <= value <= MAX_HEADER_LEVEL:
        raise InvalidAttributeError("header", value)
    return value
