"""RSS and Atom feeds for the blog posts."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, date, datetime, time

from feedgen.feed import FeedGenerator

from ..config import FEED_ATOM_PATH, FEED_RSS_PATH, SITE_AUTHOR, SITE_DESCRIPTION, SITE_TITLE
from ..content.documents import Document


def feed_documents(docs: Sequence[Document]) -> list[Document]:
    """Non-draft dated posts, newest first."""
    posts = [d for d in docs if d.is_post and not d.draft and d.date is not None]
    return sorted(posts, key=lambda d: (d.date, d.source), reverse=True)


def _published(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=UTC)


def build_feed(docs: Sequence[Document], site_url: str, now: datetime | None = None) -> FeedGenerator:
    site_url = site_url.rstrip("/")
    now = now or datetime.now(UTC)

    fg = FeedGenerator()
    fg.id(site_url + "/")
    fg.title(SITE_TITLE)
    fg.description(SITE_DESCRIPTION)
    fg.author({"name": SITE_AUTHOR})
    fg.link(href=site_url + "/", rel="alternate")
    fg.link(href=f"{site_url}/{FEED_ATOM_PATH}", rel="self")
    fg.language("en")
    fg.copyright(f"Copyright {now.year} {SITE_AUTHOR}")
    fg.updated(now)

    for doc in feed_documents(docs):
        url = f"{site_url}/{doc.destination}"
        published = _published(doc.date)
        fe = fg.add_entry(order="append")
        fe.id(url)
        fe.title(doc.title)
        fe.link(href=url)
        fe.published(published)
        fe.updated(published)
        fe.author({"name": SITE_AUTHOR})
        summary = doc.excerpt or doc.description
        if summary:
            fe.description(summary)
        for tag in doc.tags:
            fe.category(term=tag)

    return fg


def render_feeds(docs: Sequence[Document], site_url: str, now: datetime | None = None) -> dict[str, bytes]:
    """Return {relative path: xml bytes} for the RSS and Atom feeds."""
    fg = build_feed(docs, site_url, now=now)
    return {
        FEED_RSS_PATH: fg.rss_str(pretty=True),
        FEED_ATOM_PATH: fg.atom_str(pretty=True),
    }
