"""Social card images (Open Graph previews) rendered by the headless browser."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Sequence
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, Field

from ..config import SITE_HOST, SOCIAL_CARD_CONCURRENCY, SOCIAL_CARD_HEIGHT, SOCIAL_CARD_WIDTH
from ..content.documents import Document
from ..render.browser import BrowserSession
from ..render.cache import DiskCache
from ..render.css import CssFramework, CssFrameworkSettings, scan_classes
from .templates import social_card

SOCIAL_SUFFIX = "-social"
CARD_APPLIES = {"body": "font-sans"}


class SocialResult(BaseModel):
    images: list[Path] = Field(default_factory=list)
    cached: int = 0
    warnings: list[str] = Field(default_factory=list)


def social_image_path(destination: str) -> str:
    """``posts/2021/foo.html`` → ``posts/2021/foo-social.png``."""
    path = PurePosixPath(destination)
    return str(path.with_name(f"{path.stem}{SOCIAL_SUFFIX}.png"))


def card_documents(docs: Sequence[Document]) -> list[Document]:
    return [d for d in docs if not d.is_archive and not d.is_book and not d.draft]


def card_html(doc: Document, framework: CssFramework | None = None) -> str:
    """The standalone card page for a document, with just the CSS it uses."""
    framework = framework or CssFramework(CssFrameworkSettings(applies=CARD_APPLIES))
    shell = social_card(doc.title, doc.description, doc.tags, css="")
    css = framework.process(scan_classes(shell))
    return social_card(doc.title, doc.description, doc.tags, css=css, host=SITE_HOST)


async def render_social_images(
    docs: Sequence[Document],
    out_dir: Path,
    cache: DiskCache | None = None,
    session: BrowserSession | None = None,
    concurrency: int = SOCIAL_CARD_CONCURRENCY,
) -> SocialResult:
    """Write a ``-social.png`` next to every eligible page.

    Cards whose HTML has been rendered before are copied from the cache.
    """
    result = SocialResult()
    targets = card_documents(docs)
    if not targets:
        return result

    framework = CssFramework(CssFrameworkSettings(applies=CARD_APPLIES))
    jobs = [(doc, card_html(doc, framework)) for doc in targets]

    pending: list[tuple[Document, str]] = []
    for doc, html in jobs:
        png = cache.get(html) if cache is not None else None
        if png is None:
            pending.append((doc, html))
            continue
        result.images.append(_write(out_dir, doc, png))
        result.cached += 1

    if not pending:
        return result

    async with contextlib.AsyncExitStack() as stack:
        if session is None:
            try:
                session = await stack.enter_async_context(BrowserSession())
            except Exception as e:
                result.warnings.append(f"Social images skipped, browser unavailable: {e}")
                return result

        semaphore = asyncio.Semaphore(max(1, concurrency))

        async def render_one(doc: Document, html: str) -> None:
            async with semaphore:
                try:
                    png = await session.screenshot(html, SOCIAL_CARD_WIDTH, SOCIAL_CARD_HEIGHT)
                except Exception as e:
                    result.warnings.append(f"{doc.source}: social image failed: {e}")
                    return
            if cache is not None:
                cache.put(html, png, {"source": doc.source})
            result.images.append(_write(out_dir, doc, png))

        await asyncio.gather(*(render_one(doc, html) for doc, html in pending))

    result.images.sort()
    return result


def _write(out_dir: Path, doc: Document, png: bytes) -> Path:
    path = out_dir / social_image_path(doc.destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(png)
    return path
