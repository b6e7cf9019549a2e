"""Site assembly: pages, listings, feeds, books and social cards."""

from .build import BuildResult, build_site, render_document

__all__ = ["BuildResult", "build_site", "render_document"]
