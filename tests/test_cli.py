"""Tests for the command line interface."""

from __future__ import annotations

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import patch

from thirty25 import __version__
from thirty25.cli import main


class TestCli(unittest.TestCase):
    def test_version(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            main(["--version"])
        self.assertEqual(ctx.exception.code, 0)
        self.assertIn(__version__, out.getvalue())

    def test_missing_command(self) -> None:
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            main([])
        self.assertEqual(ctx.exception.code, 2)

    def test_build(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "input"
            (src / "posts").mkdir(parents=True)
            (src / "posts" / "a.md").write_text("---\ntitle: A\n---\nHello.\n", encoding="utf-8")
            out = io.StringIO()
            with redirect_stdout(out):
                code = main(["build", "--input", str(src), "--out", str(Path(td) / "public"), "--no-social", "--no-books"])
            self.assertEqual(code, 0)
            self.assertTrue((Path(td) / "public" / "posts" / "a.html").exists())
        self.assertIn("✓ Site built", out.getvalue())
        self.assertIn("Pages: 3", out.getvalue())

    def test_build_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "input"
            src.mkdir()
            (src / "bad.md").write_text("---\ntitle: [oops\n---\n", encoding="utf-8")
            err = io.StringIO()
            with redirect_stdout(io.StringIO()), redirect_stderr(err):
                code = main(["build", "--input", str(src), "--out", str(Path(td) / "public"), "--no-social"])
        self.assertEqual(code, 1)
        self.assertIn("Error: Invalid front matter in bad.md", err.getvalue())

    def test_new_post(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = io.StringIO()
            with redirect_stdout(out):
                code = main(["new-post", "My Title", "-t", "a,b", "--desc", "D", "--root", td])
            self.assertEqual(code, 0)
            self.assertEqual(len(list(Path(td).rglob("my-title.md"))), 1)
        self.assertIn("✓ Wrote new markdown file", out.getvalue())

    def test_new_post_launches_editor(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with redirect_stdout(io.StringIO()), patch("thirty25.tools.new_post.subprocess.run") as run:
                code = main(["new-post", "Editor", "-e", "--root", td])
        self.assertEqual(code, 0)
        self.assertEqual(run.call_args.args[0][0], "code")

    def test_compress_png_without_key(self) -> None:
        err = io.StringIO()
        with patch.dict(os.environ), tempfile.TemporaryDirectory() as td:
            os.environ.pop("TinyPngKey", None)
            with redirect_stdout(io.StringIO()), redirect_stderr(err):
                code = main(["compress-png", "-c", "--root", td])
        self.assertEqual(code, 1)
        self.assertIn("TinyPng key not found", err.getvalue())

    def test_cache_info_and_clear(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with patch("thirty25.render.cache.CACHE_DIR", Path(td) / "cache"):
                out = io.StringIO()
                with redirect_stdout(out):
                    self.assertEqual(main(["cache"]), 0)
                    self.assertEqual(main(["cache", "--clear"]), 0)
                self.assertFalse((Path(td) / "cache").exists())
        self.assertIn("Entries: 0", out.getvalue())
        self.assertIn("Cleared cache", out.getvalue())


if __name__ == "__main__":
    unittest.main()
