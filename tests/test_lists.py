from __future__ import annotations

import pytest

from delta_html import DeltaRenderer
from delta_html.lists import add_list_item, list_state, open_path, render_list, start_list
from delta_html.models import ListState
from delta_html.tokens import merge_tokens


def _item(text: str, kind: str = "ordered", indent: int | None = None) -> list[dict]:
    attributes: dict = {"list": kind}
    if indent is not None:
        attributes["indent"] = indent
    return [{"insert": text}, {"insert": "\n", "attributes": attributes}]


def _render(*items: list[dict], extra: list[dict] | None = None) -> str:
    ops = [op for item in items for op in item] + (extra or [])
    return DeltaRenderer({"ops": ops}).parse().to_html()


def test_single_item_list():
    assert _render(_item("A")) == "<ol><li>A</li></ol>"


def test_flat_list():
    html = _render(_item("A"), _item("B"), _item("C"))

    assert html == "<ol><li>A</li><li>B</li><li>C</li></ol>"


def test_nested_item_goes_inside_previous_item():
    html = _render(_item("A", indent=0), _item("B", indent=1), _item("C", indent=0))

    assert html == "<ol><li>A<ol><li>B</li></ol></li><li>C</li></ol>"


def test_list_ending_nested_is_closed():
    html = _render(_item("A"), _item("B", indent=1))

    assert html == "<ol><li>A<ol><li>B</li></ol></li></ol>"


def test_ascending_several_levels():
    html = _render(
        _item("A"),
        _item("B", indent=1),
        _item("C", indent=2),
        _item("D"),
    )

    assert html == "<ol><li>A<ol><li>B<ol><li>C</li></ol></li></ol></li><li>D</li></ol>"


def test_nested_list_can_use_other_kind():
    html = _render(_item("A"), _item("B", kind="unordered", indent=1), _item("C"))

    assert html == "<ol><li>A<ul><li>B</li></ul></li><li>C</li></ol>"


def test_kind_switch_at_outermost_level_starts_new_list():
    html = _render(_item("A"), _item("B", kind="unordered"))

    assert html == "<ol><li>A</li></ol><ul><li>B</li></ul>"


def test_kind_switch_keeps_following_items_in_new_list():
    html = _render(_item("A"), _item("B", kind="unordered"), _item("C", kind="unordered"))

    assert html == "<ol><li>A</li></ol><ul><li>B</li><li>C</li></ul>"


def test_kind_switch_at_nested_level_opens_sibling_list():
    html = _render(
        _item("A"),
        _item("B", indent=1),
        _item("C", kind="unordered", indent=1),
    )

    assert html == "<ol><li>A<ol><li>B</li></ol><ul><li>C</li></ul></li></ol>"


def test_bullet_is_an_alias_for_unordered():
    assert _render(_item("A", kind="bullet")) == "<ul><li>A</li></ul>"


def test_paragraph_before_list_stays_wrapped():
    ops =[{"insert": "Intro"}, {"insert": "\n"}] + _item("A")

    html = DeltaRenderer({"ops": ops}).parse().to_html()

    assert html == '<div id="line-1">Intro</div><ol><li>A</li></ol>'


def test_paragraph_after_list_gets_its_own_line():
    html = _render(_item("A"), _item("B"), extra=[{"insert": "After"}, {"insert": "\n"}])

    assert html == '<ol><li>A</li><li>B</li></ol><div id="line-2">After</div>'


def test_plain_newline_closes_list():
    html = _render(_item("A"), extra=[{"insert": "\n"}] + _item("B"))

    assert html == "<ol><li>A</li></ol><ol><li>B</li></ol>"


def test_text_pending_at_end_of_document_gets_its_own_line():
    html = _render(_item("A"), extra=[{"insert": "tail"}])

    assert html == '<ol><li>A</li></ol><div id="line-2">tail</div>'


def test_item_content_keeps_inline_markup():
    ops = [
        {"insert": "bold", "attributes": {"bold": True}},
        {"insert": " and "},
        {"insert": "</li></ol>tricky"},
        {"insert": "\n", "attributes": {"list": "ordered"}},
    ] + _item("next")

    html = DeltaRenderer({"ops": ops}).parse().to_html()

    assert html == "<ol><li><b>bold</b> and </li></ol>tricky</li><li>next</li></ol>"


def test_list_after_code_block_starts_on_new_line():
    ops = [
        {"insert": "code"},
        {"insert": "\n", "attributes": {"code-block": True}},
    ] + _item("A")

    html = DeltaRenderer({"ops": ops}).parse().to_html()

    assert html == '<pre class="hljs">code\n</pre><ol><li>A</li></ol>'


def test_list_tokens_can_be_overridden():
    ops = _item("A") + _item("B", indent=1)

    html = DeltaRenderer(
        {"ops": ops},
        tokens={"list": {"item": '<li class="item">{content}</li>'}},
    ).parse().to_html()

    assert html == '<ol><li class="item">A<ol><li class="item">B</li></ol></li></ol>'


def test_list_state_tracks_open_levels():
    renderer = DeltaRenderer({"ops": _item("A") + _item("B", kind="unordered", indent=1)}).parse()

    assert renderer.list_state == ListState(types={0: "ordered", 1: "unordered"}, indent=1)


def test_list_state_is_none_outside_lists():
    renderer = DeltaRenderer({"ops": _item("A") + [{"insert": "\n"}]}).parse()

    assert renderer.list_state is None


class TestAddListItem:
    def test_same_level_appends_item(self):
        root = start_list("ordered", 0, "A")

        assert add_list_item(root, "ordered", 0, "B") is True
        assert [item.content for item in root.items] == ["A", "B"]

    def test_descend_nests_under_last_item(self):
        root = start_list("ordered", 0, "A")

        add_list_item(root, "unordered", 1, "B")

        child = root.items[0].children[0]
        assert child.kind == "unordered"
        assert child.level == 1
        assert [item.content for item in child.items] == ["B"]

    def test_skipped_levels_open_one_nested_list(self):
        root = start_list("ordered", 0, "A")

        add_list_item(root, "ordered", 2, "B")
        add_list_item(root, "ordered", 1, "C")

        assert [node.level for node in open_path(root)] == [0, 1]
        first, second = root.items[0].children
        assert first.level == 2
        assert second.level == 1

    def test_outermost_kind_switch_is_refused(self):
        root = start_list("ordered", 0, "A")

        assert add_list_item(root, "unordered", 0, "B") is False
        assert len(root.items) == 1

    def test_shallower_item_joins_outermost_list(self):
        root = start_list("ordered", 2, "A")

        add_list_item(root, "ordered", 0, "B")

        assert root.level == 0
        assert [item.content for item in root.items] == ["A", "B"]

    def test_ascend_closes_deeper_levels(self):
        root = start_list("ordered", 0, "A")
        add_list_item(root, "ordered", 1, "B")
        add_list_item(root, "ordered", 2, "C")

        add_list_item(root, "ordered", 1, "D")

        assert list_state(root) == ListState(types={0: "ordered", 1: "ordered"}, indent=1)
        assert [item.content for item in root.items[0].children[0].items] == ["B", "D"]


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        ("ordered", "<ol><li>A</li></ol>"),
        ("unordered", "<ul><li>A</li></ul>"),
    ],
)
def test_render_list(kind: str, expected: str):
    assert render_list(start_list(kind, 0, "A"), merge_tokens()) == expected
