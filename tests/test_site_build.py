"""Tests for the static site build."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from thirty25.render.cache import DiskCache
from thirty25.site.book import BookResult
from thirty25.site.build import build_site
from thirty25.site.social import SocialResult

FIRST_POST = """---
title: First Post
description: The very first one
date: 2021-03-05
tags: [dotnet, testing]
---
Intro paragraph with a [link](/about.html).

## Setup `dotnet`

Some text.

```python
def foo():
    pass
```
"""

SECOND_POST = """---
title: Second
date: 2021-04-01
tags: testing
---
Second body.
"""

DRAFT_POST = """---
title: Draft
draft: true
---
Not yet.
"""

BOOK = """---
title: Guide
BookSources: ["posts/**/*"]
---
"""


def _write_input(root: Path) -> None:
    files = {
        "posts/2021/03/first-post.md": FIRST_POST,
        "posts/2021/04/second.md": SECOND_POST,
        "posts/2021/05/draft.md": DRAFT_POST,
        "about.md": "---\ntitle: About\n---\nAbout me.\n",
        "books/guide.md": BOOK,
        "_partial.md": "skipped",
    }
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    (root / "images").mkdir()
    (root / "images" / "pic.png").write_bytes(b"\x89PNG")


class TestSiteBuild(unittest.TestCase):
    def test_build_site_writes_pages_feeds_and_css(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "input"
            out = Path(td) / "public"
            _write_input(src)

            result = build_site(src, out, social=False, books=False, base_url="https://example.test/")

            self.assertEqual(result.documents, 5)
            self.assertEqual(result.pages, 7)
            self.assertEqual(result.static_files, 1)
            self.assertEqual(result.warnings, [])
            for rel in (
                "index.html",
                "about.html",
                "posts/2021/03/first-post.html",
                "posts/2021/04/second.html",
                "tags/index.html",
                "tags/dotnet.html",
                "tags/testing.html",
                "rss.xml",
                "atom.xml",
                "assets/styles.css",
                "images/pic.png",
            ):
                self.assertTrue((out / rel).exists(), rel)
            self.assertFalse((out / "posts/2021/05/draft.html").exists())
            self.assertFalse((out / "books/guide.html").exists())

            post = (out / "posts/2021/03/first-post.html").read_text(encoding="utf-8")
            self.assertIn('id="setup-dotnet"', post)
            self.assertIn('<a href="#setup-dotnet">Setup dotnet</a>', post)
            self.assertIn('<span class="token keyword">def</span>', post)
            self.assertIn('href="/tags/dotnet.html"', post)
            self.assertIn('content="https://example.test/posts/2021/03/first-post.html"', post)
            self.assertNotIn("-social.png", post)

            index = (out / "index.html").read_text(encoding="utf-8")
            self.assertLess(index.index("Second"), index.index("First Post"))
            self.assertIn("Intro paragraph with a link.", index)
            self.assertNotIn("Draft", index)

            css = (out / "assets/styles.css").read_text(encoding="utf-8")
            self.assertIn(".font-bold { font-weight: 700; }", css)
            self.assertIn(".prose :where(a)", css)
            self.assertIn("@media (min-width: 1024px)", css)
            self.assertNotIn(".bg-primary-900", css)

            rss = (out / "rss.xml").read_text(encoding="utf-8")
            self.assertIn("https://example.test/posts/2021/04/second.html", rss)

    def test_odd_paths_quoted_flags_and_symbol_tags(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "input"
            out = Path(td) / "public"
            files = {
                "posts/2021/13/odd.md": "---\ntitle: Odd\ndraft: \"false\"\ntags: [C#]\n---\nOdd body.\n",
                "posts/2021/04/plus.md": "---\ntitle: Plus\ntags: [C++]\n---\nPlus body.\n",
            }
            for rel, text in files.items():
                (src / rel).parent.mkdir(parents=True, exist_ok=True)
                (src / rel).write_text(text, encoding="utf-8")

            result = build_site(src, out, social=False, books=False)

            self.assertEqual(result.warnings, [])
            self.assertTrue((out / "posts/2021/13/odd.html").exists())
            self.assertIn("Odd", (out / "tags/csharp.html").read_text(encoding="utf-8"))
            self.assertIn("Plus", (out / "tags/cplusplus.html").read_text(encoding="utf-8"))
            self.assertFalse((out / "tags/c.html").exists())

            odd = (out / "posts/2021/13/odd.html").read_text(encoding="utf-8")
            self.assertIn('href="/tags/csharp.html"', odd)

            index = (out / "index.html").read_text(encoding="utf-8")
            self.assertLess(index.index("Plus"), index.index("Odd"))

    def test_books_are_handed_to_printer(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "input"
            out = Path(td) / "public"
            _write_input(src)
            pdf = out.resolve() / "books" / "guide.pdf"

            printer = AsyncMock(return_value=BookResult(pdfs=[pdf], warnings=["w"]))
            with patch("thirty25.site.build.print_books", new=printer):
                result = build_site(src, out, social=False, books=True)

            books, pipelines, out_dir, site_url = printer.await_args.args
            self.assertEqual([b.source for b in books], ["books/guide.md"])
            self.assertEqual(
                sorted(d.source for d in pipelines["Content"]),
                ["about.md", "posts/2021/03/first-post.md", "posts/2021/04/second.md"],
            )
            self.assertEqual(out_dir, out.resolve())
            self.assertEqual(result.books, 1)
            self.assertIn("books/guide.pdf", result.written)
            self.assertIn("w", result.warnings)

    def test_social_images_use_cache_and_page_links(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "input"
            out = Path(td) / "public"
            _write_input(src)

            renderer = AsyncMock(return_value=SocialResult())
            with patch("thirty25.site.build.render_social_images", new=renderer):
                build_site(
                    src,
                    out,
                    social=True,
                    books=False,
                    base_url="https://example.test",
                    cache=DiskCache(Path(td) / "cache"),
                )

            renderer.assert_awaited_once()
            post = (out / "posts/2021/03/first-post.html").read_text(encoding="utf-8")
            self.assertIn(
                'content="https://example.test/posts/2021/03/first-post-social.png"',
                post,
            )


if __name__ == "__main__":
    unittest.main()
