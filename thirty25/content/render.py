"""Render Markdown bodies to HTML and derive excerpts."""

from __future__ import annotations

import re
from html import unescape

import markdown

from ..config import EXCERPT_MAX_CHARS

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "attr_list", "footnotes", "sane_lists"]

_FIRST_PARAGRAPH = re.compile(r"<p\b[^>]*>(.*?)</p>", re.DOTALL | re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")


def render_markdown(text: str) -> str:
    """Render a Markdown body.

    Fenced code keeps its language as a ``language-xxx`` class on the
    ``<code>`` element so the highlighter can pick a lexer.
    """
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS, output_format="html")
    return md.convert(text)


def excerpt(html: str, max_chars: int = EXCERPT_MAX_CHARS) -> str:
    """Plain-text excerpt taken from the first paragraph."""
    m = _FIRST_PARAGRAPH.search(html)
    if not m:
        return ""
    text = unescape(_TAG.sub("", m.group(1)))
    text = re.sub(r"\s+", " ", text).strip()
    if len(text) <= max_chars:
        return text
    head = text[:max_chars]
    if " " in head:
        head = head.rsplit(" ", 1)[0]
    return head.rstrip(",;:.") + "…"
