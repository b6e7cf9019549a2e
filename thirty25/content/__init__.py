"""Source document loading, shortcodes, Markdown rendering and headings."""

from .documents import Document, load_documents, optimize_file_name, split_front_matter
from .headings import Heading, assign_heading_ids, flatten, gather_headings, render_toc
from .render import excerpt, render_markdown
from .shortcodes import expand_shortcodes, full_url

__all__ = [
    "Document",
    "load_documents",
    "optimize_file_name",
    "split_front_matter",
    "Heading",
    "assign_heading_ids",
    "flatten",
    "gather_headings",
    "render_toc",
    "excerpt",
    "render_markdown",
    "expand_shortcodes",
    "full_url",
]
