"""Plain-text projection of rendered HTML."""

from __future__ import annotations

from html.parser import HTMLParser

# Tag delimiters stay encoded so the text can never be read as markup again.
KEPT_REFERENCES = (("<", "&lt;"), (">", "&gt;"))


class _TagStripper(HTMLParser):
    """Collect text data and drop every tag."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: list[str] = []

    def handle_data(self, data: str) -> None:
        for character, reference in KEPT_REFERENCES:
            data = data.replace(character, reference)
        self._parts.append(data)

    def get_text(self) -> str:
        return "".join(self._parts)


def strip_tags(html: str) -> str:
    """Remove all markup from an HTML fragment, keeping its text.

    Character references are decoded, so ``&nbsp;`` becomes ``"\\xa0"``,
    except that ``<`` and ``>`` always come out as ``&lt;`` and ``&gt;``,
    whether they were encoded or stray in the input. The result never
    contains a tag delimiter.

    Examples:
        strip_tags("<b>Hello</b> <i>world</i>")  # "Hello world"
        strip_tags("<pre>a&nbsp;&lt;b&gt;</pre>")  # "a\\xa0&lt;b&gt;"
    """
    stripper = _TagStripper()
    stripper.feed(html)
    stripper.close()
    return stripper.get_text()
