"""HTML templates for the blog pages, the book and the social cards."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from html import escape

from ..config import CSS_FILE, FEED_ATOM_PATH, FEED_RSS_PATH, SITE_AUTHOR, SITE_HOST, SITE_TITLE


def html_doc(
    title: str,
    body: str,
    *,
    description: str = "",
    url: str | None = None,
    social_image: str | None = None,
    body_class: str = "antialiased bg-white text-base-900",
) -> str:
    full_title = title if title == SITE_TITLE else f"{title} - {SITE_TITLE}"
    meta = [
        '<meta charset="utf-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1">',
        f"<title>{escape(full_title)}</title>",
        f'<link rel="stylesheet" href="/{CSS_FILE}">',
        f'<link rel="alternate" type="application/rss+xml" title="{escape(SITE_TITLE)}" href="/{FEED_RSS_PATH}">',
        f'<link rel="alternate" type="application/atom+xml" title="{escape(SITE_TITLE)}" href="/{FEED_ATOM_PATH}">',
        f'<meta property="og:title" content="{escape(title)}">',
        f'<meta property="og:site_name" content="{escape(SITE_TITLE)}">',
    ]
    if description:
        meta.append(f'<meta name="description" content="{escape(description)}">')
        meta.append(f'<meta property="og:description" content="{escape(description)}">')
    if url:
        meta.append(f'<meta property="og:url" content="{escape(url)}">')
    if social_image:
        meta.append(f'<meta property="og:image" content="{escape(social_image)}">')
        meta.append('<meta name="twitter:card" content="summary_large_image">')
        meta.append(f'<meta name="twitter:image" content="{escape(social_image)}">')

    return (
        "<!doctype html>\n"
        '<html lang="en">\n'
        "<head>\n"
        + "\n".join(meta)
        + "\n</head>\n"
        f'<body class="{body_class}">\n'
        f"{site_header()}\n"
        f'<main class="container py-8">\n{body}\n</main>\n'
        f"{site_footer()}\n"
        "</body>\n"
        "</html>\n"
    )


def site_header() -> str:
    return (
        '<header class="border-b border-base-200">\n'
        '<div class="container flex items-center justify-between py-4">'
        f'<a class="font-bold text-xl text-primary-700" href="/">{escape(SITE_TITLE)}</a>'
        '<nav class="flex gap-4 text-sm">'
        f'{link("/tags/index.html", "Tags")}{link("/" + FEED_RSS_PATH, "RSS")}'
        "</nav>"
        "</div>\n"
        "</header>"
    )


def site_footer() -> str:
    return (
        '<footer class="container py-8 text-sm text-base-500">'
        f"&copy; {date.today().year} {escape(SITE_AUTHOR)}"
        "</footer>"
    )


def link(href: str, text: str, css: str = "") -> str:
    cls = f' class="{css}"' if css else ""
    return f'<a{cls} href="{escape(href, quote=True)}">{escape(text)}</a>'


def tag_links(tags: Iterable[tuple[str, str]]) -> str:
    """Items: (tag, href)."""
    items = [link(href, f"#{tag}", "text-primary-600 hover:text-primary-800") for tag, href in tags]
    if not items:
        return ""
    return '<div class="flex flex-wrap gap-2 text-sm">' + " ".join(items) + "</div>"


def format_date(value: date | None) -> str:
    if value is None:
        return ""
    return f"{value:%B} {value.day}, {value.year}"


def post_page(
    title: str,
    published: date | None,
    tags: Iterable[tuple[str, str]],
    toc_html: str,
    content_html: str,
) -> str:
    lines = [
        '<article class="lg:grid lg:grid-cols-4 lg:gap-8">',
        '<div class="lg:col-span-3">',
        f'<h1 class="font-bold text-4xl mb-2">{escape(title)}</h1>',
    ]
    when = format_date(published)
    if when:
        lines.append(f'<div class="text-sm text-base-500 mb-4">{escape(when)}</div>')
    tags_html = tag_links(tags)
    if tags_html:
        lines.append(tags_html)
    lines.append(f'<div class="prose mt-8">\n{content_html}\n</div>')
    lines.append("</div>")
    if toc_html:
        lines.append(
            '<aside class="hidden lg:block text-sm">'
            '<div class="font-semibold uppercase tracking-wide mb-2">Contents</div>'
            f"{toc_html}</aside>"
        )
    lines.append("</article>")
    return "\n".join(lines)


@dataclass(frozen=True)
class PostRow:
    title: str
    href: str
    published: date | None
    excerpt: str


def post_listing(heading: str, rows: Iterable[PostRow]) -> str:
    lines = [f'<h1 class="font-bold text-3xl mb-8">{escape(heading)}</h1>', '<ul class="space-y-8">']
    for r in rows:
        lines.append(
            "<li>"
            f'<h2 class="font-semibold text-xl">{link(r.href, r.title, "hover:text-primary-700")}</h2>'
            f'<div class="text-sm text-base-500">{escape(format_date(r.published))}</div>'
            f'<p class="mt-2 text-base-700">{escape(r.excerpt)}</p>'
            "</li>"
        )
    lines.append("</ul>")
    return "\n".join(lines)


def tag_index(items: Iterable[tuple[str, str, int]]) -> str:
    """Items: (tag, href, post count)."""
    lines = ['<h1 class="font-bold text-3xl mb-8">Tags</h1>', '<ul class="space-y-2">']
    for tag, href, count in items:
        lines.append(f'<li>{link(href, tag)} <span class="text-base-500">({count})</span></li>')
    lines.append("</ul>")
    return "\n".join(lines)


def book_page(title: str, description: str, chapters: Iterable[tuple[str, str]]) -> str:
    """Chapters: (title, html). Rendered as a single printable document."""
    lines = [
        '<div class="book">',
        f'<h1 class="font-bold text-5xl mb-4">{escape(title)}</h1>',
    ]
    if description:
        lines.append(f'<p class="text-xl text-base-600 mb-8">{escape(description)}</p>')
    for chapter_title, chapter_html in chapters:
        lines.append(
            '<section class="chapter mt-16">'
            f'<h1 class="font-bold text-3xl mb-4">{escape(chapter_title)}</h1>'
            f'<div class="prose">\n{chapter_html}\n</div>'
            "</section>"
        )
    lines.append("</div>")
    return "\n".join(lines)


def social_card(title: str, description: str, tags: Iterable[str], css: str, host: str = SITE_HOST) -> str:
    """Standalone 1200x628 card page; the stylesheet is inlined."""
    tag_text = " ".join(f"#{t}" for t in tags)
    return (
        "<!doctype html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<style>{css}</style>\n"
        "</head>\n"
        '<body class="bg-primary-900 text-white">\n'
        '<div class="flex flex-col justify-between h-screen w-screen p-16">'
        f'<div class="font-bold text-6xl leading-tight">{escape(title)}</div>'
        f'<div class="text-3xl text-primary-100">{escape(description)}</div>'
        '<div class="flex justify-between items-end text-2xl">'
        f'<div class="text-primary-300">{escape(tag_text)}</div>'
        f'<div class="font-semibold">{escape(host)}</div>'
        "</div>"
        "</div>\n"
        "</body>\n"
        "</html>\n"
    )
