"""Tests for PDF book export."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

from thirty25.content.documents import Document
from thirty25.site.book import (
    collect_book,
    filter_sources,
    make_links_absolute,
    merge_metadata,
    order_documents,
    print_books,
    rewrite_links_for_print,
)


def _doc(source: str, html: str = "", **metadata) -> Document:
    return Document(source=source, destination=source.replace(".md", ".html"), metadata=metadata, html=html)


class TestLinkRewriting(unittest.TestCase):
    def test_link_with_url_text_loses_href(self) -> None:
        html = '<p><a href="https://x.com">https://x.com</a></p>'
        self.assertEqual(rewrite_links_for_print(html), "<p><a>https://x.com</a></p>")

    def test_other_links_become_footnotes(self) -> None:
        html = '<p>See <a href="https://x.com/a">the docs</a>.</p>'
        out = rewrite_links_for_print(html)
        self.assertEqual(
            out,
            '<p>See <span class="link">the docs <span class="footnote">https://x.com/a</span></span>.</p>',
        )

    def test_no_links_unchanged(self) -> None:
        html = "<p>Nothing to see</p>"
        self.assertIs(rewrite_links_for_print(html), html)

    def test_make_links_absolute(self) -> None:
        html = '<a href="../b.html">b</a><img src="/i.png"><a href="#top">top</a><a href="https://o.com/">o</a>'
        out = make_links_absolute(html, "https://thirty25.com/posts/2021/a.html")
        self.assertIn('href="https://thirty25.com/posts/b.html"', out)
        self.assertIn('src="https://thirty25.com/i.png"', out)
        self.assertIn('href="https://thirty25.com/posts/2021/a.html#top"', out)
        self.assertIn('href="https://o.com/"', out)


class TestBookSelection(unittest.TestCase):
    def test_merge_keeps_existing(self) -> None:
        doc = _doc("posts/a.md", title="A")
        book = _doc("books/b.md", Title="Book", Author="Phil")
        merged = merge_metadata(doc, book)
        self.assertEqual(merged.get("title"), "A")
        self.assertEqual(merged.get("author"), "Phil")

    def test_filter_sources(self) -> None:
        docs = [_doc("posts/2021/a.md"), _doc("posts/2022/b.md"), _doc("about.md")]
        self.assertEqual([d.source for d in filter_sources(docs, ["posts/2021/*"])], ["posts/2021/a.md"])
        self.assertEqual(len(filter_sources(docs, ["posts/**/*"])), 2)

    def test_order_documents(self) -> None:
        docs = [_doc("a.md", order=2), _doc("b.md"), _doc("c.md", order=1)]
        self.assertEqual([d.source for d in order_documents(docs, "order")], ["c.md", "a.md", "b.md"])
        self.assertEqual(
            [d.source for d in order_documents(docs, "order", descending=True)],
            ["a.md", "c.md", "b.md"],
        )

    def test_order_mixed_types_compares_strings(self) -> None:
        docs = [_doc("a.md", order="9"), _doc("b.md", order=10)]
        self.assertEqual([d.source for d in order_documents(docs, "order")], ["b.md", "a.md"])

    def test_collect_book(self) -> None:
        content = [
            _doc("posts/2021/b.md", '<a href="/x.html">x</a>', title="B", chapter=2),
            _doc("posts/2021/a.md", "<p>a</p>", title="A", chapter=1),
            _doc("about.md", "<p>about</p>", title="About"),
        ]
        book = _doc(
            "books/guide.md",
            BookSources=["posts/2021/*"],
            BookOrderKey="chapter",
            BookPipelines=["Content", "Missing"],
        )
        warnings: list[str] = []
        chapters = collect_book(book, {"Content": content}, "https://thirty25.com", warnings)

        self.assertEqual([c.title for c in chapters], ["A", "B"])
        self.assertIn('<span class="footnote">https://thirty25.com/x.html</span>', chapters[1].html)
        self.assertEqual(chapters[0].get("BookOrderKey"), "chapter")
        self.assertEqual(len(warnings), 1)
        self.assertIn("Missing", warnings[0])

    def test_default_pipeline_is_content(self) -> None:
        book = _doc("books/all.md", BookSources="*.md")
        chapters = collect_book(book, {"Content": [_doc("about.md", "<p>x</p>")]}, "https://thirty25.com")
        self.assertEqual([c.source for c in chapters], ["about.md"])


class TestPrintBooks(unittest.IsolatedAsyncioTestCase):
    async def test_prints_pdf_and_removes_page(self) -> None:
        content = [_doc("posts/a.md", "<p>a</p>", title="A")]
        book = _doc("books/guide.md", title="Guide", BookSources=["posts/*"])
        session = MagicMock()
        session.pdf = AsyncMock(return_value=b"%PDF-1.7")

        with tempfile.TemporaryDirectory() as td:
            out = Path(td)
            result = await print_books([book], {"Content": content}, out, "https://thirty25.com", session=session)

            self.assertEqual(result.pdfs, [out / "books" / "guide.pdf"])
            self.assertEqual((out / "books" / "guide.pdf").read_bytes(), b"%PDF-1.7")
            self.assertFalse((out / "books" / "guide.html").exists())
            url = session.pdf.await_args.args[0]
            self.assertTrue(url.startswith("http://127.0.0.1:"))
            self.assertTrue(url.endswith("/books/guide.html"))

    async def test_failure_is_a_warning(self) -> None:
        content = [_doc("posts/a.md", "<p>a</p>")]
        book = _doc("books/guide.md", BookSources=["posts/*"])
        session = MagicMock()
        session.pdf = AsyncMock(side_effect=RuntimeError("browser crashed"))

        with tempfile.TemporaryDirectory() as td:
            out = Path(td)
            result = await print_books([book], {"Content": content}, out, "https://thirty25.com", session=session)
            self.assertEqual(result.pdfs, [])
            self.assertFalse((out / "books" / "guide.html").exists())

        self.assertEqual(len(result.warnings), 1)
        self.assertIn("browser crashed", result.warnings[0])

    async def test_empty_book_skipped(self) -> None:
        book = _doc("books/none.md", BookSources=["nothing/*"])
        session = MagicMock()
        session.pdf = AsyncMock()
        with tempfile.TemporaryDirectory() as td:
            result = await print_books([book], {"Content": []}, Path(td), "https://thirty25.com", session=session)
        session.pdf.assert_not_awaited()
        self.assertEqual(result.pdfs, [])
        self.assertIn("no documents", result.warnings[0])


if __name__ == "__main__":
    unittest.main()
