"""Headless Chromium through Playwright, for social cards and PDF books."""

from __future__ import annotations

import contextlib
import functools
import threading
from collections.abc import Iterator
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any

from playwright.async_api import Browser, Playwright, async_playwright

from ..config import SOCIAL_CARD_HEIGHT, SOCIAL_CARD_WIDTH


class BrowserSession:
    """One Chromium instance shared by every page rendered during a build.

    Usage:
        async with BrowserSession() as browser:
            png = await browser.screenshot(card_html)
    """

    def __init__(self, headless: bool = True):
        self.headless = headless
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def __aenter__(self) -> BrowserSession:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    def _require_browser(self) -> Browser:
        if self._browser is None:
            raise RuntimeError("BrowserSession is not started")
        return self._browser

    async def screenshot(
        self,
        html: str,
        width: int = SOCIAL_CARD_WIDTH,
        height: int = SOCIAL_CARD_HEIGHT,
    ) -> bytes:
        """Render an HTML string and capture the viewport as PNG."""
        page = await self._require_browser().new_page(viewport={"width": width, "height": height})
        try:
            await page.set_content(html, wait_until="networkidle")
            return await page.screenshot(type="png", full_page=False)
        finally:
            await page.close()

    async def pdf(
        self,
        url: str,
        width: int = SOCIAL_CARD_WIDTH,
        height: int = SOCIAL_CARD_HEIGHT,
    ) -> bytes:
        """Load a URL, wait for the network to go idle and print it to PDF."""
        page = await self._require_browser().new_page(viewport={"width": width, "height": height})
        try:
            await page.goto(url, wait_until="networkidle")
            await page.emulate_media(media="print")
            return await page.pdf(
                format="Letter",
                print_background=True,
                margin={"top": "0.75in", "bottom": "0.75in", "left": "0.75in", "right": "0.75in"},
            )
        finally:
            await page.close()


class _QuietHandler(SimpleHTTPRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        return


@contextlib.contextmanager
def serve_directory(root: Path, host: str = "127.0.0.1", port: int = 0) -> Iterator[str]:
    """Serve a directory over HTTP on a background thread.

    Yields the base URL (no trailing slash). Port 0 picks a free port.
    """
    handler = functools.partial(_QuietHandler, directory=str(root))
    server = ThreadingHTTPServer((host, port), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        bound_host, bound_port = server.server_address[:2]
        yield f"http://{bound_host}:{bound_port}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
