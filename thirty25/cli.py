"""CLI entry point for Thirty25."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .config import INPUT_DIR, OUTPUT_DIR


def app(argv: list[str] | None = None) -> None:
    """Console script entrypoint."""
    raise SystemExit(main(argv))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="thirty25",
        description="Build the Thirty25 blog and manage its content.",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"Thirty25 {__version__}",
    )

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_build = sub.add_parser("build", help="Build the static site")
    p_build.add_argument("--input", "-i", type=Path, default=INPUT_DIR, help="Source directory")
    p_build.add_argument("--out", "-o", type=Path, default=OUTPUT_DIR, help="Output directory")
    p_build.add_argument("--base-url", default=None, help="Absolute site URL (defaults to the production URL)")
    p_build.add_argument("--no-social", action="store_true", help="Skip social card images")
    p_build.add_argument("--no-books", action="store_true", help="Skip PDF book export")

    p_post = sub.add_parser("new-post", help="Create a new post")
    p_post.add_argument("title", help="Post title")
    p_post.add_argument("--tags", "-t", default="", help="Tags separated by , ; or |")
    p_post.add_argument("--desc", default="", help="Post description")
    p_post.add_argument("-e", dest="editor", action="store_true", help="Launch editor after creation")
    p_post.add_argument("--root", type=Path, default=Path("."), help="Project root")

    p_png = sub.add_parser("compress-png", help="Compress PNG images with TinyPNG")
    p_png.add_argument("-c", dest="all_files", action="store_true", help="Compress all files, not just uncommitted files")
    p_png.add_argument("--root", type=Path, default=Path("."), help="Project root")

    p_cache = sub.add_parser("cache", help="Show render cache info or clear it")
    p_cache.add_argument("--clear", action="store_true", help="Clear the cache")

    args = parser.parse_args(argv)

    if args.cmd == "build":
        return _cmd_build(args)
    if args.cmd == "new-post":
        return _cmd_new_post(args)
    if args.cmd == "compress-png":
        return _cmd_compress_png(args)
    if args.cmd == "cache":
        return _cmd_cache(args)

    parser.print_help()
    return 2


def _print_warnings(warnings: list[str]) -> None:
    if not warnings:
        return
    print(f"\nWarnings ({len(warnings)}):")
    for w in warnings[:10]:
        print(f"  - {w}")
    if len(warnings) > 10:
        print(f"  ... and {len(warnings) - 10} more")


def _cmd_build(args: Any) -> int:
    from .site.build import build_site

    try:
        result = build_site(
            args.input,
            args.out,
            social=not args.no_social,
            books=not args.no_books,
            base_url=args.base_url,
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("✓ Site built")
    print(f"  Output: {result.out_dir}")
    print(f"  Documents: {result.documents}")
    print(f"  Pages: {result.pages}")
    print(f"  Books: {result.books}")
    print(f"  Social images: {result.social_images} ({result.social_cached} cached)")
    print(f"  CSS: {result.css_bytes / 1024:.1f} KB")
    print(f"  Size: {result.total_bytes / 1024:.1f} KB")
    _print_warnings(result.warnings)
    return 0


def _cmd_new_post(args: Any) -> int:
    from .tools.new_post import launch_editor, new_post

    try:
        path = new_post(args.root, args.title, tags=args.tags, description=args.desc)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"✓ Wrote new markdown file at {path}")

    if args.editor:
        try:
            launch_editor(args.root, path)
        except Exception as e:
            print(f"Error: could not launch editor: {e}", file=sys.stderr)
            return 1
    return 0


def _cmd_compress_png(args: Any) -> int:
    from .tools.png_compress import compress_pngs, format_bytes

    async def _run() -> int:
        which = "all files" if args.all_files else "checked out files"
        print(f"Beginning compression on {which}")
        try:
            result = await compress_pngs(args.root, all_files=bool(args.all_files))
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        for f in result.files:
            print(
                f"  Compressed {f.path}. Reduced from {format_bytes(f.before)} "
                f"to {format_bytes(f.after)} ({f.reduction:.2%})"
            )
        print(
            f"✓ Compression complete. Reduced from {format_bytes(result.total_before)} "
            f"to {format_bytes(result.total_after)}"
        )
        _print_warnings(result.warnings)
        return 0

    return asyncio.run(_run())


def _cmd_cache(args: Any) -> int:
    from .render.cache import DiskCache

    try:
        cache = DiskCache()
        if args.clear:
            removed = cache.clear()
            print(f"Cleared cache: {cache.cache_dir} ({removed} entries)")
            return 0
        file_count, total_size = cache.stats()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Cache directory: {cache.cache_dir}")
    print(f"Entries: {file_count}")
    print(f"Size: {total_size / (1024 * 1024):.1f} MB")
    return 0


if __name__ == "__main__":
    app()
