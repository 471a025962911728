"""Nested list reconstruction from indent-levelled list items.

Quill-style deltas describe a list as a flat run of lines, each carrying a
``list`` kind and an ``indent`` level. The functions here rebuild the nested
``<ol>``/``<ul>`` structure as a tree of `ListNode` and `ListItem` objects,
which is only turned into markup when the document is finalized.

The open path of a list is its rightmost chain of nodes: the root, then the
last child list of the root's last item, and so on. New items always land
somewhere on that path.
"""

from __future__ import annotations

import logging

from .models import ListItem, ListNode, ListState
from .tokens import render_template

logger = logging.getLogger(__name__)


def start_list(kind: str, level: int, content: str) -> ListNode:
    """Create a list holding a single item.

    Examples:
        start_list("ordered", 0, "First")
    """
    return ListNode(kind=kind, level=level, items=[ListItem(content)])


def open_path(root: ListNode) -> list[ListNode]:
    """Return the chain of still-open lists, outermost first."""
    path = [root]
    while path[-1].items and path[-1].items[-1].children:
        path.append(path[-1].items[-1].children[-1])
    return path


def list_state(root: ListNode) -> ListState:
    """Describe the open path of `root` as per-level kinds and the current indent."""
    path = open_path(root)
    return ListState(types={node.level: node.kind for node in path}, indent=path[-1].level)


def add_list_item(root: ListNode, kind: str, level: int, content: str) -> bool:
    """Add an item to an open list tree.

    Levels deeper than `level` are closed first. When the list at `level`
    has another kind, it is closed as well and a sibling list of `kind`
    opens in the same parent item. When `level` is deeper than the open
    path, a nested list opens inside the last item of the deepest list.

    Args:
        root: Outermost list of the line being built.
        kind: Token name of the item's list, ``"ordered"`` or ``"unordered"``.
        level: Indent level of the item.
        content: Inline HTML of the item.

    Returns:
        bool: False when the item switches the kind of the outermost list, in
            which case `root` is left untouched and the caller starts a new
            list; True otherwise.

    Examples:
        root = start_list("ordered", 0, "A")
        add_list_item(root, "ordered", 1, "B")  # nested under A
        add_list_item(root, "unordered", 0, "C")  # False, needs a new list
    """
    path = open_path(root)
    previous_level = path[-1].level

    while len(path) > 1 and path[-1].level > level:
        path.pop()
    node = path[-1]

    if node.level < level:
        node.items[-1].children.append(start_list(kind, level, content))
        logger.debug("List descend: level %d -> %d (%s)", previous_level, level, kind)
        return True

    if node.kind != kind and len(path) == 1:
        logger.debug("List kind switch at outermost level %d: %s -> %s", level, node.kind, kind)
        return False

    # An item shallower than where the list started joins the outermost list.
    if node.level > level:
        node.level = level

    if node.kind != kind:
        path[-2].items[-1].children.append(start_list(kind, level, content))
        logger.debug("List kind switch at level %d: %s -> %s", level, node.kind, kind)
        return True

    node.items.append(ListItem(content))
    if previous_level != level:
        logger.debug("List ascend: level %d -> %d", previous_level, level)
    return True


def render_list(node: ListNode, tokens: dict) -> str:
    """Render a list tree with the ``list`` templates of `tokens`."""
    templates = tokens["list"]
    items = "".join(
        render_template(
            templates["item"],
            content=item.content + "".join(render_list(child, tokens) for child in item.children),
        )
        for item in node.items
    )
    return render_template(templates[node.kind], content=items)
