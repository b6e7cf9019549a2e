"""Authoring tools: post scaffolding and PNG compression."""

from .new_post import launch_editor, new_post
from .png_compress import CompressResult, compress_pngs, format_bytes, tinypng_key

__all__ = [
    "launch_editor",
    "new_post",
    "CompressResult",
    "compress_pngs",
    "format_bytes",
    "tinypng_key",
]
