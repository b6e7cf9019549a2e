"""Listing pages: the home page, archive documents and tag pages."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from ..config import SITE_DESCRIPTION, SITE_TITLE
from ..content.documents import Document, optimize_file_name
from .book import as_list, filter_sources
from .templates import PostRow, html_doc, post_listing, tag_index

ARCHIVE_SOURCES = "ArchiveSources"
TAGS_DIR = "tags"

# Spelled out so C#, C++ and C get different pages
TAG_SYMBOLS = {"#": "sharp", "+": "plus"}


def tag_slug(tag: str) -> str:
    text = tag
    for symbol, word in TAG_SYMBOLS.items():
        text = text.replace(symbol, word)
    return optimize_file_name(text) or "tag"


def tag_slugs(tags: Iterable[str]) -> dict[str, str]:
    """Map each case-folded tag to a page slug, numbering any collisions.

    ``index`` is reserved for the tag index page.
    """
    slugs: dict[str, str] = {}
    used = {"index"}
    for key in sorted({t.casefold() for t in tags}):
        base = slug = tag_slug(key)
        n = 1
        while slug in used:
            slug = f"{base}-{n}"
            n += 1
        used.add(slug)
        slugs[key] = slug
    return slugs


def post_tag_slugs(docs: Sequence[Document]) -> dict[str, str]:
    """Tag slugs for every tag used by a listed post."""
    return tag_slugs(t for post in listed_posts(docs) for t in post.tags)


def tag_href(tag: str, slugs: Mapping[str, str] | None = None) -> str:
    slug = (slugs or {}).get(tag.casefold()) or tag_slug(tag)
    return f"/{TAGS_DIR}/{slug}.html"


def listed_posts(docs: Sequence[Document]) -> list[Document]:
    """Published posts, newest first. Undated posts go last."""
    posts = [d for d in docs if d.is_post and not d.draft and not d.is_book and not d.is_archive]
    dated = sorted((d for d in posts if d.date is not None), key=lambda d: (d.date, d.source), reverse=True)
    undated = sorted((d for d in posts if d.date is None), key=lambda d: d.source)
    return dated + undated


def post_rows(posts: Sequence[Document]) -> list[PostRow]:
    return [
        PostRow(title=p.title, href=f"/{p.destination}", published=p.date, excerpt=p.excerpt)
        for p in posts
    ]


def group_by_tag(posts: Sequence[Document]) -> dict[str, list[Document]]:
    """Tags keyed case-insensitively; the first spelling seen wins."""
    groups: dict[str, list[Document]] = {}
    names: dict[str, str] = {}
    for post in posts:
        for tag in post.tags:
            key = tag.casefold()
            name = names.setdefault(key, tag)
            groups.setdefault(name, []).append(post)
    return dict(sorted(groups.items(), key=lambda kv: kv[0].lower()))


def archive_pages(docs: Sequence[Document]) -> dict[str, str]:
    """Return {destination: html} for every listing page.

    Archive documents (front matter ``ArchiveSources``) list the posts matching
    their globs, with their own content as an introduction. When none of them
    lands on ``index.html`` a default home page is generated.
    """
    posts = listed_posts(docs)
    pages: dict[str, str] = {}

    for archive in (d for d in docs if d.is_archive):
        selected = filter_sources(posts, as_list(archive.get(ARCHIVE_SOURCES)))
        body = post_listing(archive.title, post_rows(selected))
        if archive.html:
            body = f'<div class="prose mb-8">\n{archive.html}\n</div>\n{body}'
        pages[archive.destination] = html_doc(archive.title, body, description=archive.description)

    if "index.html" not in pages:
        pages["index.html"] = html_doc(
            SITE_TITLE,
            post_listing("Recent posts", post_rows(posts)),
            description=SITE_DESCRIPTION,
        )

    groups = group_by_tag(posts)
    slugs = tag_slugs(groups)
    for tag, tagged in groups.items():
        dest = tag_href(tag, slugs).lstrip("/")
        pages[dest] = html_doc(f"#{tag}", post_listing(f"Posts tagged #{tag}", post_rows(tagged)))

    pages[f"{TAGS_DIR}/index.html"] = html_doc(
        "Tags",
        tag_index((tag, tag_href(tag, slugs), len(tagged)) for tag, tagged in groups.items()),
    )
    return pages
