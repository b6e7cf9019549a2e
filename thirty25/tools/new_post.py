"""Scaffold a new blog post with front matter."""

from __future__ import annotations

import subprocess
from datetime import datetime
from pathlib import Path

import yaml

from ..config import INPUT_DIR, POSTS_DIR
from ..content.documents import TAG_SEPARATORS, optimize_file_name


def front_matter(title: str, description: str, tags: str, when: datetime) -> str:
    """YAML front matter block (camelCase keys) fenced with ``---``."""
    data = {
        "title": title,
        "description": description,
        "date": f"{when.year}-{when.month}-{when.day}",
        "tags": [t.strip() for t in TAG_SEPARATORS.split(tags or "") if t.strip()],
    }
    body = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)
    return f"---\n{body.strip()}\n---\n"


def post_path(root: Path, title: str, when: datetime) -> Path:
    name = optimize_file_name(title)
    if not name:
        raise ValueError(f"Title {title!r} does not produce a usable file name")
    return root / INPUT_DIR / POSTS_DIR / f"{when:%Y}" / f"{when:%m}" / f"{name}.md"


def new_post(
    root: Path,
    title: str,
    tags: str = "",
    description: str = "",
    now: datetime | None = None,
) -> Path:
    """Write input/posts/{yyyy}/{MM}/{title}.md and return its path.

    Raises:
        FileExistsError: if a post with that name already exists this month
    """
    when = now or datetime.now()
    path = post_path(root, title, when)
    if path.exists():
        raise FileExistsError(f"{path} already exists")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(front_matter(title, description, tags, when), encoding="utf-8")
    return path


def launch_editor(root: Path, path: Path) -> None:
    """Open the project in VS Code with the cursor in the new post."""
    subprocess.run(["code", str(root), "-g", f"{path}:0"], check=True)
