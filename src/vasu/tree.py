"""Pretty directory tree rendering for ``vasu tree``."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Iterator, NamedTuple

from .exceptions import EntryError
from .walk import check_root, is_hidden, scan_dir

BRANCH = "├── "
LAST_BRANCH = "└── "
VERTICAL = "│   "
SPACE = "    "


class TreeLine(NamedTuple):
    """One rendered line: connector *prefix*, entry *name*, and what it is."""

    prefix: str
    name: str
    is_dir: bool
    size: int | None = None
    link_target: str | None = None


def _sort_key(entry: os.DirEntry) -> tuple[bool, str]:
    return (not entry.is_dir(follow_symlinks=False), entry.name.lower())


def render_tree(
    root: str | os.PathLike[str],
    *,
    levels: int = 4,
    include_hidden: bool = False,
    errors: list[EntryError] | None = None,
) -> Iterator[TreeLine]:
    """Yield the lines of a tree drawing of *root*, *levels* deep.

    Directories come before files, each group in case-insensitive name
    order.  Symlinks are shown with their target and never descended.
    Unreadable directories are appended to *errors* and drawn empty.
    """
    base = check_root(root)

    def _render(dir_path: Path, prefix: str, level: int, rel: str) -> Iterator[TreeLine]:
        if level >= levels:
            return
        try:
            children = scan_dir(dir_path)
        except OSError as exc:
            if errors is not None:
                errors.append(EntryError.from_os_error(rel or ".", exc))
            return
        visible = []
        for child in children:
            try:
                st = child.stat(follow_symlinks=False)
            except OSError as exc:
                if errors is not None:
                    errors.append(EntryError.from_os_error(child.name, exc))
                continue
            if include_hidden or not is_hidden(child.name, st):
                visible.append((child, st))
        visible.sort(key=lambda pair: _sort_key(pair[0]))

        for i, (child, st) in enumerate(visible):
            last = i == len(visible) - 1
            connector = LAST_BRANCH if last else BRANCH
            child_rel = f"{rel}/{child.name}" if rel else child.name
            if stat.S_ISDIR(st.st_mode):
                yield TreeLine(prefix + connector, child.name, True)
                yield from _render(Path(child.path), prefix + (SPACE if last else VERTICAL),
                                   level + 1, child_rel)
            elif stat.S_ISLNK(st.st_mode):
                try:
                    target = os.readlink(child.path)
                except OSError as exc:
                    if errors is not None:
                        errors.append(EntryError.from_os_error(child_rel, exc))
                    target = None
                yield TreeLine(prefix + connector, child.name, False, link_target=target)
            else:
                yield TreeLine(prefix + connector, child.name, False, size=st.st_size)

    yield from _render(base, "", 0, "")
