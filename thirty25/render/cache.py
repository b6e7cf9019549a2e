"""Disk cache for rendered artifacts (social cards)."""

import hashlib
import json
import os
import shutil
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..config import CACHE_DIR

FALLBACK_ENV = "THIRTY25_CACHE_DIR_FALLBACK"
FALLBACK_DIR = "/tmp/thirty25-cache"


class DiskCache:
    """Rendered bytes keyed by the sha256 of the input that produced them.

    An entry is ``{cache_dir}/{digest[:2]}/{digest}.bin``; a ``.meta.json``
    beside it records when and from what source it was rendered.
    """

    def __init__(self, cache_dir: Path | None = None):
        self.cache_dir = cache_dir or CACHE_DIR
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            self.cache_dir = Path(os.getenv(FALLBACK_ENV, FALLBACK_DIR))
            self.cache_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def digest(key: str) -> str:
        return hashlib.sha256(key.encode("utf-8")).hexdigest()

    def _entry(self, key: str) -> Path:
        digest = self.digest(key)
        return self.cache_dir / digest[:2] / f"{digest}.bin"

    def get(self, key: str) -> bytes | None:
        """Cached bytes for key, or None."""
        try:
            return self._entry(key).read_bytes()
        except OSError:
            return None

    def put(self, key: str, content: bytes, meta: dict[str, Any] | None = None) -> bool:
        """Store content. Returns False when the cache could not be written."""
        entry = self._entry(key)
        info = {"rendered_at": datetime.now(UTC).isoformat(), "size": len(content), **(meta or {})}
        try:
            entry.parent.mkdir(parents=True, exist_ok=True)
            entry.write_bytes(content)
            entry.with_suffix(".meta.json").write_text(json.dumps(info, indent=2, sort_keys=True))
        except OSError:
            return False
        return True

    def stats(self) -> tuple[int, int]:
        """(entries, total bytes) currently cached."""
        if not self.cache_dir.exists():
            return 0, 0
        sizes = [p.stat().st_size for p in self.cache_dir.rglob("*.bin")]
        return len(sizes), sum(sizes)

    def clear(self) -> int:
        """Delete the cache directory. Returns how many entries it held."""
        entries, _ = self.stats()
        if self.cache_dir.exists():
            shutil.rmtree(self.cache_dir)
        return entries
