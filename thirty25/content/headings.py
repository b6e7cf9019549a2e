"""Gather headings from rendered HTML into a table-of-contents tree."""

from __future__ import annotations

import re
from dataclasses import dataclass
from html import escape
from html.parser import HTMLParser

from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

HEADING_TAGS = {f"h{i}": i for i in range(1, 7)}


class Heading(BaseModel):
    """A heading and the headings nested below it."""

    level: int
    id: str | None = None
    text: str
    content: str
    children: list[Heading] = Field(default_factory=list)


@dataclass
class _Seen:
    """A gathered heading plus a link to its parent in the tree."""

    heading: Heading
    parent: _Seen | None


def heading_slug(text: str) -> str:
    """Slug used for heading anchors."""
    slug = text.strip().lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-") or "section"


def assign_heading_ids(html: str) -> str:
    """Give every heading without an id a unique anchor id."""
    soup = BeautifulSoup(html, "html.parser")
    used: dict[str, int] = {}
    for el in soup.find_all(id=True):
        used[str(el["id"])] = 0

    changed = False
    for el in soup.find_all(list(HEADING_TAGS)):
        if el.get("id"):
            continue
        base = heading_slug(el.get_text())
        candidate = base
        while candidate in used:
            used[base] = used.get(base, 0) + 1
            candidate = f"{base}-{used[base]}"
        used[candidate] = 0
        el["id"] = candidate
        changed = True

    return str(soup) if changed else html


def gather_headings(html: str, level: int = 2, nested_elements: bool = False) -> list[Heading]:
    """Collect h1..h{level} elements and arrange them into a tree.

    Args:
        html: Rendered HTML
        level: Deepest heading level to gather
        nested_elements: Keep nested markup (links, code) in each heading's
            content instead of only its text

    Returns:
        Root headings in document order; deeper headings hang off the nearest
        preceding heading with a smaller level.
    """
    parser = _HeadingParser(max_level=level)
    parser.feed(html)
    parser.close()

    roots: list[Heading] = []
    previous: _Seen | None = None

    for found in parser.found:
        text = re.sub(r"\s+", " ", "".join(found.text)).strip()
        heading = Heading(
            level=found.level,
            id=found.id,
            text=text,
            content="".join(found.html).strip() if nested_elements else text,
        )

        # Walk back through the previous heading and its ancestors until one is shallower.
        parent = previous
        while parent is not None and parent.heading.level >= heading.level:
            parent = parent.parent

        if parent is None:
            roots.append(heading)
        else:
            parent.heading.children.append(heading)

        previous = _Seen(heading=heading, parent=parent)

    return roots


def flatten(roots: list[Heading]) -> list[Heading]:
    """Depth-first list of every heading in the tree."""
    out: list[Heading] = []
    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        out.append(node)
        stack.extend(reversed(node.children))
    return out


def render_toc(roots: list[Heading]) -> str:
    """Render the heading tree as nested lists of anchor links."""
    if not roots:
        return ""
    lines = ["<ul>"]
    for h in roots:
        label = escape(h.text)
        item = f'<a href="#{escape(h.id, quote=True)}">{label}</a>' if h.id else label
        if h.children:
            item += render_toc(h.children)
        lines.append(f"<li>{item}</li>")
    lines.append("</ul>")
    return "".join(lines)


@dataclass
class _Found:
    level: int
    id: str | None
    text: list[str]
    html: list[str]


class _HeadingParser(HTMLParser):
    """Streaming collector for heading text and inner markup."""

    def __init__(self, max_level: int) -> None:
        super().__init__(convert_charrefs=True)
        self.max_level = max_level
        self.found: list[_Found] = []
        self._current: _Found | None = None
        self._tag: str | None = None
        self._depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        tag_l = tag.lower()
        if self._current is not None:
            if tag_l == self._tag:
                self._depth += 1
            self._current.html.append(self.get_starttag_text() or f"<{tag_l}>")
            return

        level = HEADING_TAGS.get(tag_l)
        if level is None or level > self.max_level:
            return

        attr_dict = {k.lower(): (v or "") for k, v in attrs}
        self._current = _Found(level=level, id=attr_dict.get("id") or None, text=[], html=[])
        self._tag = tag_l
        self._depth = 0

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self._current is not None:
            self._current.html.append(self.get_starttag_text() or f"<{tag.lower()}/>")

    def handle_endtag(self, tag: str) -> None:
        if self._current is None:
            return
        tag_l = tag.lower()
        if tag_l == self._tag:
            if self._depth == 0:
                self.found.append(self._current)
                self._current = None
                self._tag = None
                return
            self._depth -= 1
        self._current.html.append(f"</{tag_l}>")

    def handle_data(self, data: str) -> None:
        if self._current is None or not data:
            return
        self._current.text.append(data)
        self._current.html.append(escape(data, quote=False))
