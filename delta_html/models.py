"""Data models for delta-html."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class InsertKind(Enum):
    """Kinds of insert the engine dispatches on.

    Attributes:
        NEWLINES: A run of one or more newline characters and nothing else.
        TEXT: Any other string.
        IMAGE: A structured image reference.
        FORMULA: A structured formula reference.
        EMBED: Any other structured insert.
    """

    NEWLINES = auto()
    TEXT = auto()
    IMAGE = auto()
    FORMULA = auto()
    EMBED = auto()


@dataclass
class ListItem:
    """One ``<li>`` of a reconstructed list.

    Attributes:
        content: Inline HTML of the item.
        children: Lists nested inside the item, in order.
    """

    content: str
    children: list[ListNode] = field(default_factory=list)


@dataclass
class ListNode:
    """A list element at one indent level.

    Attributes:
        kind: Token name of the list, ``"ordered"`` or ``"unordered"``.
        level: Indent level the list was opened at.
        items: Items of the list, in order.
    """

    kind: str
    level: int
    items: list[ListItem] = field(default_factory=list)


@dataclass
class ListState:
    """Snapshot of the list currently being built.

    Attributes:
        types: List kind open at each indent level of the open path.
        indent: Indent level of the most recently added item.
    """

    types: dict[int, str] = field(default_factory=dict)
    indent: int = 0


@dataclass
class CodeBlock:
    """Escaped chunks of one preformatted block, newlines included."""

    chunks: list[str] = field(default_factory=list)


@dataclass
class Line:
    """One logical output line.

    Attributes:
        content: Inline HTML of the line. On block lines this holds text that
            arrived after the block and still waits for its newline.
        block: List tree or code block the line was turned into, if any.
    """

    content: str = ""
    block: ListNode | CodeBlock | None = None
