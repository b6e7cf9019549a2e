"""Configuration constants and paths for Thirty25."""

import os
from pathlib import Path

# Site identity
SITE_HOST = os.getenv("THIRTY25_HOST", "thirty25.com")
SITE_TITLE = os.getenv("THIRTY25_TITLE", "Thirty25")
SITE_AUTHOR = os.getenv("THIRTY25_AUTHOR", "Phil Scott")
SITE_DESCRIPTION = os.getenv("THIRTY25_DESCRIPTION", "Notes on .NET, tooling and building things.")
PROD_SITE_URL = f"https://{SITE_HOST}"

# Input/output layout (relative to the project root)
INPUT_DIR = Path(os.getenv("THIRTY25_INPUT_DIR", "input"))
OUTPUT_DIR = Path(os.getenv("THIRTY25_OUTPUT_DIR", "public"))
POSTS_DIR = "posts"
CSS_FILE = "assets/styles.css"

# Table of contents: gather h1..h{HEADING_LEVEL}
HEADING_LEVEL = 2

# Code blocks handed to the token classifier
HIGHLIGHT_SELECTOR = 'pre code[class*="language-"]'

# Social card viewport
SOCIAL_CARD_WIDTH = 1200
SOCIAL_CARD_HEIGHT = 628
SOCIAL_CARD_CONCURRENCY = 4

# Feeds
FEED_RSS_PATH = "rss.xml"
FEED_ATOM_PATH = "atom.xml"

# Excerpts used in listings and feeds
EXCERPT_MAX_CHARS = 280

# Render cache location - survives between builds
CACHE_DIR = Path(os.getenv("THIRTY25_CACHE_DIR", Path.home() / ".thirty25" / "cache"))

# TinyPNG
TINYPNG_KEY_ENV = "TinyPngKey"
TINYPNG_SHRINK_URL = "https://api.tinify.com/shrink"

# HTTP client settings
CONNECT_TIMEOUT = 30.0
READ_TIMEOUT = 60.0
MAX_RETRIES = 3
