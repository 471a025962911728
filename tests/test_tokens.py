from __future__ import annotations

from delta_html.constants import DEFAULT_TOKENS
from delta_html.tokens import merge_tokens, render_template, split_template


def test_merge_tokens_returns_defaults():
    tokens = merge_tokens()

    assert tokens["bold"] == "<b>{content}</b>"
    assert tokens["list"] == dict(DEFAULT_TOKENS["list"])
    assert tokens["header"][1] == "<h1>{content}</h1>"


def test_merge_tokens_copies_are_independent():
    first = merge_tokens()
    second = merge_tokens()

    first["list"]["item"] = "<li class='changed'>{content}</li>"
    first["header"][2] = "<h2 class='changed'>{content}</h2>"

    assert second["list"]["item"] == "<li>{content}</li>"
    assert second["header"][2] == "<h2>{content}</h2>"
    assert DEFAULT_TOKENS["list"]["item"] == "<li>{content}</li>"


def test_scalar_override_replaces_default():
    tokens = merge_tokens({"bold": "<strong>{content}</strong>"})

    assert tokens["bold"] == "<strong>{content}</strong>"
    assert tokens["italic"] == "<i>{content}</i>"


def test_nested_override_keeps_other_variants():
    tokens = merge_tokens({"script": {"super": "<sup class='s'>{content}</sup>"}})

    assert tokens["script"] == {
        "sub": "<sub>{content}</sub>",
        "super": "<sup class='s'>{content}</sup>",
    }


def test_header_sequence_override():
    tokens = merge_tokens({"header": ["", "<h1 class='t'>{content}</h1>"]})

    assert tokens["header"][1] == "<h1 class='t'>{content}</h1>"
    assert tokens["header"][2] == "<h2>{content}</h2>"


def test_header_mapping_override_accepts_string_levels():
    tokens = merge_tokens({"header": {"3": "<h3 class='t'>{content}</h3>"}})

    assert tokens["header"][3] == "<h3 class='t'>{content}</h3>"
    assert tokens["header"][0] == ""


def test_render_template_substitutes_all_occurrences():
    template = DEFAULT_TOKENS["formula"]

    assert render_template(template, formula="x^2") == (
        '<span class="katex-formula" data-formula="x^2">x^2</span>'
    )


def test_render_template_leaves_unknown_placeholders():
    assert render_template("{content} {other}", content="a") == "a {other}"


def test_render_template_is_single_pass():
    assert render_template("{content}|{value}", content="{value}", value="v") == "{value}|v"


def test_render_template_formats_numbers():
    assert render_template(DEFAULT_TOKENS["line"], number=3, content="x") == (
        '<div id="line-3">x</div>'
    )


def test_split_template():
    assert split_template("<ol>{content}</ol>") == ("<ol>", "</ol>")
    assert split_template("no placeholder") == ("no placeholder", "")
