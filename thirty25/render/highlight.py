"""Syntax highlighting by classifying code with a Pygments lexer.

Each code block is run through the lexer, the classified spans are mapped to
highlight.js-style class names and the block is marked ``hljs`` so it is not
highlighted twice.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from html import escape
from typing import NamedTuple

from bs4 import BeautifulSoup
from pygments import token as T
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from ..config import HIGHLIGHT_SELECTOR

HIGHLIGHTED_CLASS = "hljs"


class Range(NamedTuple):
    """A classified slice of the source text."""

    start: int
    end: int
    classification: T._TokenType | None
    text: str


# Most specific first; lookups walk up the token hierarchy.
_CLASS_MAP: dict[T._TokenType, str | None] = {
    T.Name.Class: "title.class",
    T.Name.Namespace: "title.class",
    T.Name.Exception: "title.class",
    T.Keyword.Type: "keyword",
    T.Name.Function: "title.function",
    T.Name.Function.Magic: "title.function",
    T.Comment: "comment",
    T.Keyword: "keyword",
    T.Literal.String: "string",
    T.Literal.Number: "number",
    T.Operator: "operator",
    T.Punctuation: "punctuation",
    T.Name: "symbol",
    T.Text: None,
    T.Whitespace: None,
    T.Error: None,
}


def classification_to_css(ttype: T._TokenType | None) -> str:
    """Map a token classification to the CSS class used by the theme."""
    if ttype is None:
        return ""
    node = ttype
    while node is not None:
        if node in _CLASS_MAP:
            return _CLASS_MAP[node] or ""
        node = node.parent
    return "-".join(part.lower() for part in ttype).replace(" ", "-")


def classify(code: str, lexer: Lexer) -> list[Range]:
    """Classify code into ranges. Ranges may leave gaps."""
    ranges: list[Range] = []
    for index, ttype, value in lexer.get_tokens_unprocessed(code):
        if not value:
            continue
        ranges.append(Range(index, index + len(value), ttype, value))
    return ranges


def fill_gaps(text: str, ranges: Iterable[Range]) -> Iterator[Range]:
    """Yield ranges covering all of text.

    Uncovered stretches become unclassified ranges and a range repeating the
    previous span is dropped.
    """
    current = 0
    previous: Range | None = None

    for r in ranges:
        if r.start > current:
            yield Range(current, r.start, None, text[current:r.start])

        if previous is None or (r.start, r.end) != (previous.start, previous.end):
            if r.start >= current:
                yield r

        previous = r
        current = max(current, r.end)

    if current < len(text):
        yield Range(current, len(text), None, text[current:])


def lexer_for(element_classes: Iterable[str]) -> Lexer | None:
    """Pick a lexer from a ``language-xxx`` class, if Pygments knows it."""
    for cls in element_classes:
        if not cls.startswith("language-"):
            continue
        name = cls[len("language-"):]
        if not name:
            continue
        try:
            return get_lexer_by_name(name, stripnl=False, ensurenl=False, stripall=False)
        except ClassNotFound:
            return None
    return None


def highlight_code(code: str, lexer: Lexer) -> str:
    """Return highlighted inner HTML for a block of code."""
    out: list[str] = []
    for r in fill_gaps(code, classify(code, lexer)):
        css = classification_to_css(r.classification)
        if css:
            out.append(f'<span class="token {css}">{escape(r.text, quote=False)}</span>')
        else:
            out.append(escape(r.text, quote=False))
    return "".join(out)


def highlight_html(html: str, selector: str = HIGHLIGHT_SELECTOR) -> tuple[str, bool]:
    """Highlight every matching code block in an HTML document.

    Returns:
        (html, changed). When nothing was highlighted the input is returned
        untouched.
    """
    soup = BeautifulSoup(html, "html.parser")
    highlighted = False

    for element in soup.select(selector):
        classes = list(element.get("class") or [])
        # Don't touch anything that is already highlighted
        if HIGHLIGHTED_CLASS in classes:
            continue
        lexer = lexer_for(classes)
        if lexer is None:
            continue

        code = element.get_text()
        fragment = BeautifulSoup(highlight_code(code, lexer), "html.parser")
        element.clear()
        element.append(fragment)
        element["class"] = classes + [HIGHLIGHTED_CLASS]
        highlighted = True

    return (str(soup), True) if highlighted else (html, False)
