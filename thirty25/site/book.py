"""PDF book export.

A book is a document whose front matter names other documents to collect
(``BookSources`` globs and/or ``BookPipelines``). The collected pages are
rolled into one printable page and printed to PDF by the headless browser.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

from ..content.documents import Document, parse_bool
from ..render.browser import BrowserSession, serve_directory
from .templates import book_page, html_doc

BOOK_SOURCES = "BookSources"
BOOK_PIPELINES = "BookPipelines"
BOOK_ORDER_KEY = "BookOrderKey"
BOOK_ORDER_DESCENDING = "BookOrderDescending"

DEFAULT_PIPELINES = ["Content"]


class BookResult(BaseModel):
    pdfs: list[Path] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def merge_metadata(doc: Document, book: Document) -> Document:
    """Copy the book's metadata onto doc, keeping keys doc already has."""
    merged = dict(doc.metadata)
    existing = {str(k).lower() for k in merged}
    for key, value in book.metadata.items():
        if str(key).lower() not in existing:
            merged[key] = value
    return doc.model_copy(update={"metadata": merged})


def make_links_absolute(html: str, page_url: str) -> str:
    """Resolve relative ``href``/``src`` attributes against the page URL."""
    soup = BeautifulSoup(html, "html.parser")
    changed = False
    for tag, attr in (("a", "href"), ("img", "src"), ("link", "href"), ("script", "src")):
        for element in soup.find_all(tag, attrs={attr: True}):
            value = element[attr]
            absolute = urljoin(page_url, value)
            if absolute != value:
                element[attr] = absolute
                changed = True
    return str(soup) if changed else html


def rewrite_links_for_print(html: str) -> str:
    """Turn links into printable text.

    A link whose text is its own URL just loses the ``href``. Any other link
    becomes ``<span class="link">TEXT <span class="footnote">HREF</span></span>``.
    """
    soup = BeautifulSoup(html, "html.parser")
    links = soup.find_all("a", attrs={"href": True})
    if not links:
        return html

    for a in links:
        href = a["href"]
        text = a.get_text()
        if text == href:
            del a["href"]
            continue
        span = soup.new_tag("span", attrs={"class": "link"})
        span.append(text + " ")
        footnote = soup.new_tag("span", attrs={"class": "footnote"})
        footnote.string = href
        span.append(footnote)
        a.replace_with(span)
    return str(soup)


def filter_sources(docs: Sequence[Document], patterns: Sequence[str]) -> list[Document]:
    """Keep documents whose source path matches any glob pattern."""
    out: list[Document] = []
    for doc in docs:
        if any(_source_matches(doc.source, p) for p in patterns):
            out.append(doc)
    return out


def _source_matches(source: str, pattern: str) -> bool:
    pattern = pattern.lstrip("/")
    if fnmatchcase(source, pattern):
        return True
    # "posts/**/*.md" should also match a file directly inside posts/
    if "**/" in pattern and fnmatchcase(source, pattern.replace("**/", "")):
        return True
    return PurePosixPath(source).match(pattern)


def order_documents(docs: Sequence[Document], key: str, descending: bool = False) -> list[Document]:
    """Order by a metadata value. Missing values always sort last."""
    present = [d for d in docs if d.get(key) is not None]
    missing = [d for d in docs if d.get(key) is None]
    values = [_sortable(d.get(key)) for d in present]
    # Mixed types fall back to comparing their string forms
    if len({type(v) for v in values}) > 1:
        keyed = [(str(d.get(key)), d) for d in present]
    else:
        keyed = list(zip(values, present))
    keyed.sort(key=lambda kv: kv[0], reverse=descending)
    return [d for _, d in keyed] + missing


def _sortable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float, date, str)):
        return value
    return str(value)


def collect_book(
    book: Document,
    pipelines: Mapping[str, Sequence[Document]],
    site_url: str,
    warnings: list[str] | None = None,
) -> list[Document]:
    """Gather, rewrite, filter and order the documents that make up a book."""
    names = as_list(book.get(BOOK_PIPELINES)) or DEFAULT_PIPELINES
    docs: list[Document] = []
    for name in names:
        if name not in pipelines:
            if warnings is not None:
                warnings.append(f"{book.source}: unknown book pipeline {name!r}")
            continue
        docs.extend(pipelines[name])

    prepared: list[Document] = []
    for doc in docs:
        doc = merge_metadata(doc, book)
        page_url = urljoin(site_url.rstrip("/") + "/", doc.destination)
        html = make_links_absolute(doc.html, page_url)
        html = rewrite_links_for_print(html)
        prepared.append(doc.model_copy(update={"html": html}))

    if book.has(BOOK_SOURCES):
        prepared = filter_sources(prepared, as_list(book.get(BOOK_SOURCES)))

    if book.has(BOOK_ORDER_KEY):
        prepared = order_documents(
            prepared,
            str(book.get(BOOK_ORDER_KEY)),
            descending=parse_bool(book.get(BOOK_ORDER_DESCENDING, False)),
        )
    return prepared


def render_book(book: Document, chapters: Sequence[Document]) -> str:
    body = book_page(
        title=book.title,
        description=book.description,
        chapters=[(c.title, c.html) for c in chapters],
    )
    return html_doc(book.title, body, description=book.description)


async def print_books(
    books: Sequence[Document],
    pipelines: Mapping[str, Sequence[Document]],
    out_dir: Path,
    site_url: str,
    session: BrowserSession | None = None,
) -> BookResult:
    """Render each book page into out_dir and print it to ``.pdf``.

    The intermediate HTML page is removed once printed. A book whose
    selection is empty, or whose printing fails, is reported as a warning.
    """
    result = BookResult()
    jobs: list[tuple[Document, list[Document]]] = []
    for book in books:
        chapters = collect_book(book, pipelines, site_url, result.warnings)
        if not chapters:
            result.warnings.append(f"{book.source}: book has no documents, skipped")
            continue
        jobs.append((book, chapters))

    if not jobs:
        return result

    async with contextlib.AsyncExitStack() as stack:
        if session is None:
            try:
                session = await stack.enter_async_context(BrowserSession())
            except Exception as e:
                result.warnings.append(f"Book export skipped, browser unavailable: {e}")
                return result

        with serve_directory(out_dir) as base_url:
            for book, chapters in jobs:
                page = out_dir / book.destination
                pdf_path = page.with_suffix(".pdf")
                try:
                    page.parent.mkdir(parents=True, exist_ok=True)
                    page.write_text(render_book(book, chapters), encoding="utf-8")
                    pdf = await session.pdf(f"{base_url}/{book.destination}")
                    pdf_path.write_bytes(pdf)
                    result.pdfs.append(pdf_path)
                except Exception as e:
                    result.warnings.append(f"{book.source}: PDF export failed: {e}")
                finally:
                    if page.exists():
                        page.unlink()

    return result


def export_books(
    books: Sequence[Document],
    pipelines: Mapping[str, Sequence[Document]],
    out_dir: Path,
    site_url: str,
) -> BookResult:
    """Synchronous wrapper around :func:`print_books`."""
    return asyncio.run(print_books(books, pipelines, out_dir, site_url))
