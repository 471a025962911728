"""Delta to HTML conversion engine."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence

from .buffer import LineBuffer
from .code_block import add_code_line
from .config import RenderConfig, apply_overrides, validate_config
from .constants import ESCAPED_NEWLINE_PATTERN, LIST_KINDS, NEWLINE_RUN_PATTERN
from .exceptions import (
    FormatError,
    InvalidAttributeError,
    MalformedOperationError,
    UnsupportedDeltaTypeError,
)
from .finalize import finalize_lines
from .inline import apply_inline_attributes
from .lists import add_list_item, list_state, start_list
from .models import CodeBlock, InsertKind, Line, ListNode, ListState
from .plaintext import strip_tags
from .tokens import merge_tokens, render_template

logger = logging.getLogger(__name__)


def decode_delta(delta: object) -> object:
    """Turn a JSON document or an already-structured delta into a Python object.

    Args:
        delta: JSON text (``str`` or ``bytes``) or a mapping.

    Returns:
        object: The decoded document. Its shape is checked by `DeltaRenderer.parse`.

    Raises:
        UnsupportedDeltaTypeError: If `delta` is of any other type.
        FormatError: If the JSON text cannot be decoded.

    Examples:
        decode_delta('{"ops": [{"insert": "Hello\\n"}]}')
    """
    if isinstance(delta, (str, bytes, bytearray)):
        try:
            return json.loads(delta)
        except ValueError as error:
            raise FormatError(f"The delta is not valid JSON: {error}") from error
    if isinstance(delta, Mapping):
        return delta
    raise UnsupportedDeltaTypeError(delta)


def classify_insert(insert: object) -> InsertKind | None:
    """Return the dispatch kind of an insert, or None when it is neither text nor a mapping."""
    if isinstance(insert, str):
        if NEWLINE_RUN_PATTERN.fullmatch(insert):
            return InsertKind.NEWLINES
        return InsertKind.TEXT
    if isinstance(insert, Mapping):
        if "image" in insert:
            return InsertKind.IMAGE
        if "formula" in insert:
            return InsertKind.FORMULA
        return InsertKind.EMBED
    return None


class DeltaRenderer:
    """Render a rich-text delta to HTML and plain text.

    The renderer walks the operations once. Text is accumulated on the line
    under the cursor; newline operations complete lines and, when they carry
    attributes, format the line they complete. List and code-block lines stay
    open across consecutive newlines of the same kind so that runs of items
    build one list tree or one preformatted block. `to_html` renders the
    buffered lines afterwards.

    Args:
        delta: JSON text or a mapping with an ``ops`` list.
        config: Rendering configuration; defaults to `RenderConfig()`.
        tokens: Token overrides layered over ``config.tokens``.

    Raises:
        UnsupportedDeltaTypeError: If `delta` is neither JSON text nor a mapping.
        FormatError: If `delta` is text that is not valid JSON.
        ConfigError: If the configuration or token overrides are invalid.

    Examples:
        DeltaRenderer({"ops": [{"insert": "Hi", "attributes": {"bold": True}}]}).parse().to_html()
        # '<div id="line-1"><b>Hi</b></div>'
    """

    def __init__(
        self,
        delta: object,
        config: RenderConfig | None = None,
        *,
        tokens: Mapping[str, object] | None = None,
    ):
        self._delta = decode_delta(delta)

        config = config or RenderConfig()
        if tokens is not None:
            config = apply_overrides(config, tokens=tokens)
        validate_config(config)
        self.config = config

        self._tokens = merge_tokens(config.tokens)
        self._buffer = LineBuffer()
        self._token_index = 0

    @property
    def tokens(self) -> dict:
        """The token table private to this renderer."""
        return self._tokens

    @property
    def lines(self) -> list[Line]:
        return self._buffer.lines

    @property
    def line_index(self) -> int:
        return self._buffer.cursor

    @property
    def token_index(self) -> int:
        """Number of operations processed by the last `parse` call."""
        return self._token_index

    @property
    def list_state(self) -> ListState | None:
        """State of the list on the current line, or None outside lists."""
        if self._buffer.cursor >= len(self._buffer):
            return None
        line = self._buffer[self._buffer.cursor]
        if isinstance(line.block, ListNode):
            return list_state(line.block)
        return None

    def parse(self) -> DeltaRenderer:
        """Process every operation of the delta, in order.

        Returns:
            DeltaRenderer: The renderer itself, for chaining.

        Raises:
            FormatError: If the delta has no ``ops`` list.
            MalformedOperationError: If an operation has no usable ``insert``.
            InvalidAttributeError: If an attribute value is malformed and the
                configuration is strict.
        """
        if not isinstance(self._delta, Mapping) or "ops" not in self._delta:
            raise FormatError("Malformed delta, missing the 'ops' member.")

        ops = self._delta["ops"]
        if isinstance(ops, (str, bytes)) or not isinstance(ops, Sequence):
            raise FormatError("Malformed delta, 'ops' must be a list of operations.")

        self._buffer = LineBuffer()
        self._token_index = 0
        for index, op in enumerate(ops):
            self._dispatch(index, op)
            self._token_index += 1

        logger.debug(
            "Parsed %d operations into %d lines", self._token_index, len(self._buffer)
        )
        return self

    def to_html(self) -> str:
        """Return the finalized HTML. Safe to call any number of times."""
        return finalize_lines(self._buffer.lines, self._tokens, wrap_lines=self.config.wrap_lines)

    def to_plain_text(self) -> str:
        """Return the text of `to_html` with all markup removed."""
        return strip_tags(self.to_html())

    def _dispatch(self, index: int, op: object) -> None:
        if not isinstance(op, Mapping) or "insert" not in op:
            raise MalformedOperationError(index, "missing `insert`")

        insert = op["insert"]
        attributes = op.get("attributes") or {}
        if not isinstance(attributes, Mapping):
            raise MalformedOperationError(index, "`attributes` must be a mapping")

        kind = classify_insert(insert)
        if kind is None:
            raise MalformedOperationError(
                index, f"unsupported insert type {type(insert).__name__}"
            )
        logger.debug("Operation %d: %s on line %d", index, kind.name, self._buffer.cursor)

        if kind is InsertKind.NEWLINES:
            self._linify(insert, attributes)
            return

        if kind is InsertKind.TEXT and ESCAPED_NEWLINE_PATTERN.fullmatch(insert):
            self._advance(1)

        if kind is InsertKind.IMAGE:
            self._imagify(insert, attributes)
        elif kind is InsertKind.FORMULA:
            self._formulify(insert, attributes)
        elif kind is InsertKind.EMBED:
            if self.config.strict:
                raise MalformedOperationError(index, f"unsupported embed {sorted(insert)}")
            logger.warning("Skipping unsupported embed at index %d: %s", index, sorted(insert))
        else:
            self._tokenize(insert, attributes)

    def _tokenize(self, text: str, attributes: Mapping, overwrite: bool = False) -> None:
        if attributes:
            html = apply_inline_attributes(text, attributes, self._tokens, strict=self.config.strict)
            self._buffer.append(html, overwrite)
            return

        *completed, last = text.split("\n")
        for segment in completed:
            self._buffer.append(segment, overwrite)
            self._advance(1)
        self._buffer.append(last, overwrite)

    def _linify(self, insert: str, attributes: Mapping) -> None:
        line_count = max(insert.count("\n"), 1)

        if attributes:
            if attributes.get("list") is not None:
                self._listify(attributes)
                return
            if attributes.get("code-block"):
                self._prettify(line_count)
                return

            line = self._buffer.ensure()
            if line.block is not None:
                self._buffer.close_block()
            self._tokenize(self._buffer.ensure().content, attributes, overwrite=True)

        self._advance(line_count)

    def _advance(self, count: int) -> None:
        # The first newline after a block only steps off the block line.
        line = self._buffer.ensure()
        if line.block is not None and not self._buffer.close_block():
            count -= 1
        self._buffer.advance(count)

    def _listify(self, attributes: Mapping) -> None:
        kind = self._list_kind(attributes["list"])
        level = self._indent_level(attributes.get("indent", 0))

        line = self._buffer.ensure()
        if isinstance(line.block, CodeBlock):
            self._buffer.close_block()
            line = self._buffer.ensure()

        content, line.content = line.content, ""
        if not isinstance(line.block, ListNode):
            line.block = start_list(kind, level, content)
            logger.debug("List start: %s at level %d on line %d", kind, level, self._buffer.cursor)
        elif not add_list_item(line.block, kind, level, content):
            self._buffer.push(Line(block=start_list(kind, level, content)))
            logger.debug("List restart: %s at level %d on line %d", kind, level, self._buffer.cursor)

    def _prettify(self, line_count: int) -> None:
        line = self._buffer.ensure()
        if isinstance(line.block, ListNode):
            self._buffer.close_block()
            line = self._buffer.ensure()

        content, line.content = line.content, ""
        if line.block is None:
            line.block = CodeBlock()
        add_code_line(line.block, content, line_count)
        logger.debug("Code block on line %d: %d chunks", self._buffer.cursor, len(line.block.chunks))

    def _imagify(self, insert: Mapping, attributes: Mapping) -> None:
        html = render_template(
            self._tokens["image"],
            image=insert["image"],
            alt=insert.get("alt") or "",
        )
        self._tokenize(html, attributes)

    def _formulify(self, insert: Mapping, attributes: Mapping) -> None:
        html = render_template(self._tokens["formula"], formula=insert["formula"])
        self._tokenize(html, attributes)

    def _list_kind(self, value: object) -> str:
        if isinstance(value, str) and value in LIST_KINDS:
            return LIST_KINDS[value]
        if self.config.strict:
            raise InvalidAttributeError("list", value)
        logger.warning("Unsupported list kind %r, rendering as unordered", value)
        return "unordered"

    def _indent_level(self, value: object) -> int:
        if value is None:
            return 0
        if not isinstance(value, bool) and isinstance(value, int) and value >= 0:
            return value
        if self.config.strict:
            raise InvalidAttributeError("indent", value)
        logger.warning("Unsupported indent %r, using level 0", value)
        return 0


def delta_to_html(delta: object, config: RenderConfig | None = None, **kwargs) -> str:
    """Render a delta to HTML in one call.

    Examples:
        delta_to_html({"ops": [{"insert": "Hello\\n"}]})
    """
    return DeltaRenderer(delta, config, **kwargs).parse().to_html()


def delta_to_plain_text(delta: object, config: RenderConfig | None = None, **kwargs) -> str:
    """Render a delta to plain text in one call."""
    return DeltaRenderer(delta, config, **kwargs).parse().to_plain_text()
