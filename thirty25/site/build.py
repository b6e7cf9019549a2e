"""Static site build: Markdown sources in, HTML/CSS/PDF/PNG/XML out."""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field

from ..config import CSS_FILE, HEADING_LEVEL, HIGHLIGHT_SELECTOR, PROD_SITE_URL
from ..content.documents import Document, load_documents
from ..content.headings import assign_heading_ids, gather_headings, render_toc
from ..content.render import render_markdown
from ..content.shortcodes import expand_shortcodes
from ..render.cache import DiskCache
from ..render.css import CssFramework, scan_classes
from ..render.highlight import highlight_html
from .archives import archive_pages, post_tag_slugs, tag_href
from .book import print_books, render_book
from .feeds import render_feeds
from .social import SocialResult, render_social_images, social_image_path
from .templates import html_doc, post_page


class BuildResult(BaseModel):
    """Summary of a site build."""

    documents: int = 0
    pages: int = 0
    books: int = 0
    social_images: int = 0
    social_cached: int = 0
    static_files: int = 0
    css_bytes: int = 0
    out_dir: str = ""
    total_bytes: int = 0
    written: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def render_document(doc: Document, warnings: list[str] | None = None) -> Document:
    """Run a document through shortcodes, Markdown, heading ids, headings and highlighting."""
    try:
        body = expand_shortcodes(doc.body)
    except ValueError as e:
        body = doc.body
        if warnings is not None:
            warnings.append(f"{doc.source}: shortcode failed: {e}")

    html = assign_heading_ids(render_markdown(body))
    headings = gather_headings(html, level=HEADING_LEVEL, nested_elements=True)

    try:
        html, _ = highlight_html(html, HIGHLIGHT_SELECTOR)
    except Exception as e:
        if warnings is not None:
            warnings.append(f"{doc.source}: highlighting failed: {e}")

    return doc.model_copy(update={"html": html, "headings": headings})


def page_html(
    doc: Document,
    site_url: str,
    social: bool = True,
    tag_slugs: Mapping[str, str] | None = None,
) -> str:
    image = f"{site_url}/{social_image_path(doc.destination)}" if social else None
    body = post_page(
        title=doc.title,
        published=doc.date if doc.is_post else None,
        tags=[(t, tag_href(t, tag_slugs)) for t in doc.tags],
        toc_html=render_toc(doc.headings),
        content_html=doc.html,
    )
    return html_doc(
        doc.title,
        body,
        description=doc.description or doc.excerpt,
        url=f"{site_url}/{doc.destination}",
        social_image=image,
    )


def build_site(
    input_dir: Path,
    out_dir: Path,
    *,
    social: bool = True,
    books: bool = True,
    base_url: str | None = None,
    cache: DiskCache | None = None,
) -> BuildResult:
    """Build the blog from input_dir into out_dir.

    Optional stages (highlighting, feeds, books, social images) record a
    warning and let the rest of the build proceed when they fail.
    """
    input_dir = input_dir.resolve()
    out_dir = out_dir.resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    site_url = (base_url or PROD_SITE_URL).rstrip("/")

    result = BuildResult(out_dir=str(out_dir))
    docs = [render_document(d, result.warnings) for d in load_documents(input_dir)]
    result.documents = len(docs)

    content = [d for d in docs if not d.is_book and not d.is_archive and not d.draft]
    book_docs = [d for d in docs if d.is_book]

    slugs = post_tag_slugs(docs)
    written: dict[str, str] = {}
    for doc in content:
        written[doc.destination] = page_html(doc, site_url, social=social, tag_slugs=slugs)

    for dest, html in archive_pages(docs).items():
        if dest in written:
            result.warnings.append(f"{dest}: listing page skipped, a document already writes it")
            continue
        written[dest] = html

    for dest, html in written.items():
        _write_text(out_dir / dest, html)
    result.pages = len(written)
    result.written.extend(written)

    try:
        for dest, xml in render_feeds(docs, site_url).items():
            (out_dir / dest).write_bytes(xml)
            result.written.append(dest)
    except Exception as e:
        result.warnings.append(f"Feeds failed: {e}")

    result.static_files = _copy_static(input_dir, out_dir, result.written)

    # The stylesheet must exist before books are printed, so book pages are
    # scanned from their rendered HTML rather than from disk.
    pipelines = {"Content": content}
    classes: set[str] = set()
    for html in written.values():
        classes |= scan_classes(html)
    if books:
        for book in book_docs:
            classes |= scan_classes(render_book(book, content))
    css = CssFramework().process(classes)
    _write_text(out_dir / CSS_FILE, css)
    result.css_bytes = len(css.encode("utf-8"))
    result.written.append(CSS_FILE)

    if books and book_docs:
        book_result = asyncio.run(print_books(book_docs, pipelines, out_dir, site_url))
        result.books = len(book_result.pdfs)
        result.written.extend(p.relative_to(out_dir).as_posix() for p in book_result.pdfs)
        result.warnings.extend(book_result.warnings)

    if social:
        social_result = _social_images(content, out_dir, cache, result.warnings)
        result.social_images = len(social_result.images)
        result.social_cached = social_result.cached
        result.written.extend(p.relative_to(out_dir).as_posix() for p in social_result.images)
        result.warnings.extend(social_result.warnings)

    result.total_bytes = _dir_size_bytes(out_dir)
    return result


def _social_images(
    docs: list[Document],
    out_dir: Path,
    cache: DiskCache | None,
    warnings: list[str],
) -> SocialResult:
    try:
        cache = cache or DiskCache()
    except OSError as e:
        warnings.append(f"Render cache unavailable: {e}")
        cache = None
    return asyncio.run(render_social_images(docs, out_dir, cache=cache))


def _copy_static(input_dir: Path, out_dir: Path, written: list[str]) -> int:
    """Copy every non-Markdown input file (images, downloads) to the output."""
    if not input_dir.exists():
        return 0
    count = 0
    for path in sorted(input_dir.rglob("*")):
        if not path.is_file() or path.suffix.lower() == ".md":
            continue
        rel = path.relative_to(input_dir)
        if any(part.startswith((".", "_")) for part in rel.parts):
            continue
        target = out_dir / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(path, target)
        written.append(rel.as_posix())
        count += 1
    return count


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _dir_size_bytes(path: Path) -> int:
    total = 0
    for p in path.rglob("*"):
        if p.is_file():
            total += p.stat().st_size
    return total
