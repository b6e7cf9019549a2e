"""Rendering extensions: highlighting, JIT CSS, headless browser, cache."""

from .browser import BrowserSession, serve_directory
from .cache import DiskCache
from .css import CssFramework, CssFrameworkSettings, scan_classes
from .design_system import DesignSystem, site_design_system
from .highlight import highlight_html

__all__ = [
    "BrowserSession",
    "serve_directory",
    "DiskCache",
    "CssFramework",
    "CssFrameworkSettings",
    "scan_classes",
    "DesignSystem",
    "site_design_system",
    "highlight_html",
]
