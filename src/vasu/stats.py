"""Disk usage and line-count statistics."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

from .exceptions import EntryError, VasuError, error_from_os
from .walk import check_root, scan_dir, walk

_UNITS = ("B", "KB", "MB", "GB", "TB")

NO_EXTENSION = "(no ext)"


def human_size(size: int) -> str:
    """Format *size* in bytes with one decimal and a binary unit (``1.5 KB``)."""
    s = float(size)
    for unit in _UNITS:
        if s < 1024.0:
            return f"{s:.1f} {unit}"
        s /= 1024.0
    return f"{s:.1f} PB"


class ItemSize(NamedTuple):
    """Recursive size of one immediate child of a directory."""

    path: Path
    size: int
    is_dir: bool


def tree_size(path: str | os.PathLike[str], errors: list[EntryError] | None = None) -> int:
    """Total size of the regular files under *path* (or of *path* itself if not a directory)."""
    p = Path(path)
    if not p.is_dir() or p.is_symlink():
        return p.lstat().st_size
    return sum(e.size for e in walk(p, include_hidden=True, errors=errors) if e.is_file)


def item_sizes(directory: str | os.PathLike[str],
               errors: list[EntryError] | None = None) -> list[ItemSize]:
    """Return the size of every immediate child of *directory*, largest first."""
    root = check_root(directory)
    try:
        children = scan_dir(root)
    except OSError as exc:
        raise error_from_os(exc, f"Cannot read {root}", path=str(root))
    items = []
    for child in children:
        p = Path(child.path)
        try:
            size = tree_size(p, errors)
        except OSError as exc:
            if errors is not None:
                errors.append(EntryError.from_os_error(child.name, exc))
            continue
        except VasuError as exc:
            if errors is not None:
                errors.append(EntryError(path=child.name, error=str(exc), kind=exc.kind))
            continue
        items.append(ItemSize(p, size, child.is_dir(follow_symlinks=False)))
    items.sort(key=lambda i: (-i.size, i.path.name))
    return items


@dataclass
class ExtensionCount:
    """Files and lines for one extension."""
    extension: str
    files: int = 0
    lines: int = 0


def _normalize_ext(ext: str) -> str:
    ext = ext.lower()
    return ext if ext.startswith(".") else f".{ext}"


def _count_text_lines(path: Path) -> int:
    """Line count of a UTF-8 text file; binary files count zero lines."""
    try:
        return len(path.read_bytes().decode("utf-8").splitlines())
    except UnicodeDecodeError:
        return 0


def count_lines(directory: str | os.PathLike[str], extensions: list[str] | None = None,
                errors: list[EntryError] | None = None) -> list[ExtensionCount]:
    """Count files and lines per extension under *directory*.

    *extensions* (with or without a leading dot) restricts the count.
    Files without an extension are grouped under ``(no ext)``.  Rows are
    sorted by file count, largest first, then by extension.
    """
    wanted = {_normalize_ext(e) for e in extensions or ()}
    counts: dict[str, ExtensionCount] = {}
    for entry in walk(directory, include_hidden=True, errors=errors):
        if not entry.is_file:
            continue
        ext = entry.path.suffix.lower() or NO_EXTENSION
        if wanted and ext not in wanted:
            continue
        try:
            lines = _count_text_lines(entry.path)
        except OSError as exc:
            if errors is not None:
                errors.append(EntryError.from_os_error(entry.relative, exc))
            continue
        row = counts.setdefault(ext, ExtensionCount(ext))
        row.files += 1
        row.lines += lines
    return sorted(counts.values(), key=lambda r: (-r.files, r.extension))
