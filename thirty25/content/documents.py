"""Load Markdown source documents and their front matter."""

from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path, PurePosixPath
from typing import Any

import yaml
from pydantic import BaseModel, Field

from ..config import POSTS_DIR
from .headings import Heading
from .render import excerpt as html_excerpt

FRONT_MATTER_PATTERN = re.compile(r"\A---[ \t]*\n(?P<yaml>.*?)\n---[ \t]*(?:\n|\Z)", re.DOTALL)

# Year/month prefix used by the posts layout (posts/2021/03/foo.md)
DATE_PATH_PATTERN = re.compile(r"(?:^|/)(?P<year>\d{4})/(?P<month>\d{1,2})/")

TAG_SEPARATORS = re.compile(r"[,;|]")

TRUE_STRINGS = {"true", "yes", "on", "1"}


class Document(BaseModel):
    """A Markdown source document moving through the build."""

    source: str
    destination: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    body: str = ""
    html: str = ""
    headings: list[Heading] = Field(default_factory=list)

    def get(self, key: str, default: Any = None) -> Any:
        """Case-insensitive metadata lookup."""
        if key in self.metadata:
            return self.metadata[key]
        key_l = key.lower()
        for k, v in self.metadata.items():
            if str(k).lower() == key_l:
                return v
        return default

    def has(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    @property
    def title(self) -> str:
        value = self.get("title")
        if value:
            return str(value)
        stem = PurePosixPath(self.source).stem
        return re.sub(r"[-_]+", " ", stem).strip().title()

    @property
    def description(self) -> str:
        return str(self.get("description") or "")

    @property
    def date(self) -> date | None:
        value = self.get("date")
        parsed = _coerce_date(value)
        if parsed is not None:
            return parsed
        m = DATE_PATH_PATTERN.search(self.source)
        if m:
            try:
                return date(int(m.group("year")), int(m.group("month")), 1)
            except ValueError:
                return None
        return None

    @property
    def tags(self) -> list[str]:
        return parse_tags(self.get("tags"))

    @property
    def excerpt(self) -> str:
        value = self.get("excerpt")
        if value:
            return str(value)
        return html_excerpt(self.html)

    @property
    def draft(self) -> bool:
        return parse_bool(self.get("draft", False))

    @property
    def is_book(self) -> bool:
        return self.has("BookSources") or self.has("BookPipelines")

    @property
    def is_archive(self) -> bool:
        return self.has("ArchiveSources")

    @property
    def is_post(self) -> bool:
        return self.source.startswith(f"{POSTS_DIR}/")


_MISSING = object()


def parse_tags(value: Any) -> list[str]:
    """Normalize a tags value (list or separated string) to a list of names."""
    if value is None:
        return []
    if isinstance(value, str):
        items = TAG_SEPARATORS.split(value)
    elif isinstance(value, (list, tuple, set)):
        items = [str(v) for v in value]
    else:
        items = [str(value)]
    return [t.strip() for t in items if t and t.strip()]


def parse_bool(value: Any) -> bool:
    """Front matter flag: strings count only when they read as true."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


def _coerce_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in ("%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y/%m/%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def split_front_matter(text: str, source: str = "<string>") -> tuple[dict[str, Any], str]:
    """Split a leading YAML front matter block from the Markdown body.

    Returns:
        (metadata, body). Documents without front matter get an empty dict.

    Raises:
        ValueError: if the front matter is not valid YAML or not a mapping
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if text.startswith("\ufeff"):
        text = text[1:]

    m = FRONT_MATTER_PATTERN.match(text)
    if not m:
        return {}, text

    try:
        data = yaml.safe_load(m.group("yaml"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid front matter in {source}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Front matter in {source} must be a mapping")

    return data, text[m.end():]


def optimize_file_name(name: str) -> str:
    """Turn a title or file name into a URL friendly file name.

    Lowercases, replaces whitespace with dashes and drops characters that
    would need escaping in a URL.
    """
    text = name.strip().lower()
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"[^a-z0-9\-_.~]", "", text)
    text = re.sub(r"-{2,}", "-", text)
    return text.strip(".-")


def destination_for(source: str) -> str:
    """Map a source path (posts/2021/03/My Post.md) to its output page."""
    path = PurePosixPath(source)
    parts = [optimize_file_name(p) or p for p in path.parent.parts]
    stem = optimize_file_name(path.stem) or path.stem
    return str(PurePosixPath(*parts, f"{stem}.html")) if parts else f"{stem}.html"


def load_document(path: Path, input_dir: Path) -> Document:
    """Read a single Markdown file into a Document."""
    source = path.relative_to(input_dir).as_posix()
    metadata, body = split_front_matter(path.read_text(encoding="utf-8"), source=source)
    return Document(
        source=source,
        destination=destination_for(source),
        metadata=metadata,
        body=body,
    )


def load_documents(input_dir: Path) -> list[Document]:
    """Load every Markdown document below the input directory.

    Files and directories whose name starts with an underscore are partials
    and are skipped.
    """
    if not input_dir.exists():
        return []

    docs: list[Document] = []
    for path in sorted(input_dir.rglob("*.md")):
        rel_parts = path.relative_to(input_dir).parts
        if any(part.startswith("_") for part in rel_parts):
            continue
        docs.append(load_document(path, input_dir))
    return docs
