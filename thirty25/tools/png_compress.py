"""Compress the site's PNG images through TinyPNG."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field

from ..config import INPUT_DIR, TINYPNG_KEY_ENV
from .tinypng import TinyPngClient


class CompressedFile(BaseModel):
    path: str
    before: int
    after: int

    @property
    def reduction(self) -> float:
        return 1 - self.after / self.before if self.before else 0.0


class CompressResult(BaseModel):
    all_files: bool = False
    files: list[CompressedFile] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def total_before(self) -> int:
        return sum(f.before for f in self.files)

    @property
    def total_after(self) -> int:
        return sum(f.after for f in self.files)


def tinypng_key(env: Mapping[str, str] | None = None) -> str:
    env = os.environ if env is None else env
    key = env.get(TINYPNG_KEY_ENV)
    if not key:
        raise RuntimeError(
            f'TinyPng key not found. Expected value for environment variable "{TINYPNG_KEY_ENV}"'
        )
    return key


def format_bytes(size: float) -> str:
    """Human readable size: ``512 B``, ``1.5 KB``, ``2.25 MB``."""
    for unit in ("B", "KB", "MB", "GB"):
        if abs(size) < 1024 or unit == "GB":
            return f"{int(size)} {unit}" if unit == "B" else f"{size:.2f} {unit}"
        size /= 1024
    return f"{size:.2f} GB"


def changed_files(root: Path) -> set[Path]:
    """Files git reports as modified, added or untracked under root."""
    try:
        proc = subprocess.run(
            ["git", "status", "--porcelain", "-z", "--untracked-files=all"],
            cwd=root,
            capture_output=True,
            encoding="utf-8",
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        raise RuntimeError(f"Could not read git status in {root}: {e}") from e

    top = _git_toplevel(root)
    out: set[Path] = set()
    # -z entries are NUL separated and unquoted; a rename or copy is followed
    # by an extra entry holding the old path
    entries = iter(proc.stdout.split("\0"))
    for entry in entries:
        if len(entry) < 4:
            continue
        status, rel = entry[:2], entry[3:]
        if "R" in status or "C" in status:
            next(entries, None)
        if "D" in status:
            continue
        out.add((top / rel).resolve())
    return out


def _git_toplevel(root: Path) -> Path:
    proc = subprocess.run(
        ["git", "rev-parse", "--show-toplevel"],
        cwd=root,
        capture_output=True,
        text=True,
        check=False,
    )
    if proc.returncode != 0 or not proc.stdout.strip():
        return root.resolve()
    return Path(proc.stdout.strip())


def find_pngs(root: Path, all_files: bool = False) -> list[Path]:
    """PNGs under the input dir; only git-changed ones unless all_files."""
    input_dir = root / INPUT_DIR
    if not input_dir.exists():
        return []
    pngs = sorted(p.resolve() for p in input_dir.rglob("*") if p.is_file() and p.suffix.lower() == ".png")
    if all_files:
        return pngs
    changed = changed_files(root)
    return [p for p in pngs if p in changed]


async def compress_pngs(
    root: Path,
    all_files: bool = False,
    client: TinyPngClient | None = None,
) -> CompressResult:
    """Compress candidate PNGs in place, one at a time."""
    client = client or TinyPngClient(tinypng_key())
    result = CompressResult(all_files=all_files)
    pngs = find_pngs(root, all_files=all_files)
    if not pngs:
        return result

    async with client:
        for png in pngs:
            before = png.stat().st_size
            try:
                data = await client.compress(png.read_bytes())
            except Exception as e:
                result.warnings.append(f"{png.name}: {e}")
                continue
            png.write_bytes(data)
            rel = png.relative_to(root.resolve()).as_posix() if png.is_relative_to(root.resolve()) else str(png)
            result.files.append(CompressedFile(path=rel, before=before, after=len(data)))
    return result
