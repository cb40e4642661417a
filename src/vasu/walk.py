"""Lazy, depth-first directory walking.

Every tree-shaped command (cp, diff, dupe, find, clean, count, zip, ...)
enumerates the filesystem through :func:`walk`.  It yields immutable
:class:`Entry` values, never follows symlinks, and keeps going when a
subdirectory cannot be read: the failure is appended to the caller's
``errors`` list instead of aborting the walk.
"""

from __future__ import annotations

import os
import stat
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterator, NamedTuple

from .exceptions import EntryError, NotFoundError, error_from_os

if TYPE_CHECKING:
    from ._exclude import ExcludeFilter
    from ._glob import NameMatcher


class EntryKind(str, Enum):
    """Kind of a walked entry: ``FILE``, ``DIRECTORY``, or ``SYMLINK``."""
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"

    def __str__(self) -> str:          # noqa: D105
        return self.value

    @classmethod
    def from_mode(cls, mode: int) -> EntryKind | None:
        """Return the kind for an ``st_mode``, or ``None`` for special files."""
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISREG(mode):
            return cls.FILE
        return None


class Entry(NamedTuple):
    """A filesystem object discovered during a walk.

    Attributes:
        path: Absolute path on disk.
        relative: Path relative to the walk root, ``/``-separated.
        kind: :class:`EntryKind` of the object (symlinks are not followed).
        size: Size in bytes as reported by ``lstat``.
        mode: Permission bits (``stat.S_IMODE`` of ``st_mode``).
        depth: Depth below the root; immediate children have depth 0.
    """

    path: Path
    relative: str
    kind: EntryKind
    size: int
    mode: int
    depth: int

    @property
    def name(self) -> str:
        return self.relative.rsplit("/", 1)[-1]

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK


def is_hidden(name: str, st: os.stat_result | None = None) -> bool:
    """Return True for dotfiles, and on Windows for entries with the hidden attribute."""
    if name.startswith("."):
        return True
    if st is not None:
        return bool(getattr(st, "st_file_attributes", 0) & stat.FILE_ATTRIBUTE_HIDDEN)
    return False


def scan_dir(path: str | os.PathLike[str]) -> list[os.DirEntry]:
    """List *path* sorted by name.

    The directory handle is closed before returning, so recursive callers
    never hold more than one handle open at a time.
    """
    with os.scandir(path) as it:
        return sorted(it, key=lambda e: e.name)


def check_root(root: str | os.PathLike[str]) -> Path:
    """Return *root* as an absolute path, raising if it is not a readable directory."""
    p = Path(root)
    try:
        st = p.stat()
    except FileNotFoundError:
        raise NotFoundError(f"Not found: {p}", path=str(p))
    except OSError as exc:
        raise error_from_os(exc, f"Cannot access {p}", path=str(p))
    if not stat.S_ISDIR(st.st_mode):
        raise NotFoundError(f"Not a directory: {p}", path=str(p))
    return p.absolute()


def walk(
    root: str | os.PathLike[str],
    *,
    max_depth: int | None = None,
    include_hidden: bool = False,
    match: NameMatcher | None = None,
    exclude: ExcludeFilter | None = None,
    prune: Callable[[Entry], bool] | None = None,
    errors: list[EntryError] | None = None,
) -> Iterator[Entry]:
    """Yield every entry under *root*, depth-first, siblings in name order.

    *max_depth* ``0`` yields only the root's immediate children; ``None``
    is unbounded.  Hidden entries are skipped unless *include_hidden*.

    *match* filters which entries are yielded but does not stop the walk
    from descending into non-matching directories.  Entries excluded by
    *exclude* are neither yielded nor descended.  A directory for which
    *prune* returns True is yielded but not descended.

    Raises :class:`~vasu.exceptions.NotFoundError` if *root* is missing or
    not a directory, and a :class:`~vasu.exceptions.VasuError` if the root
    itself cannot be listed.  Unreadable subdirectories are appended to
    *errors* (when given) and skipped.
    """
    base = check_root(root)

    def _walk_dir(dir_path: Path, rel_dir: str, depth: int) -> Iterator[Entry]:
        if exclude is not None:
            exclude.enter_directory(dir_path, rel_dir)
        try:
            children = scan_dir(dir_path)
        except OSError as exc:
            if not rel_dir:
                raise error_from_os(exc, f"Cannot read {dir_path}", path=str(dir_path))
            if errors is not None:
                errors.append(EntryError.from_os_error(rel_dir, exc))
            return

        for child in children:
            rel = f"{rel_dir}/{child.name}" if rel_dir else child.name
            try:
                st = child.stat(follow_symlinks=False)
            except OSError as exc:
                if errors is not None:
                    errors.append(EntryError.from_os_error(rel, exc))
                continue
            kind = EntryKind.from_mode(st.st_mode)
            if kind is None:
                continue
            if not include_hidden and is_hidden(child.name, st):
                continue
            is_dir = kind is EntryKind.DIRECTORY
            if exclude is not None and exclude.is_excluded_in_walk(rel, is_dir=is_dir):
                continue

            entry = Entry(
                path=Path(child.path),
                relative=rel,
                kind=kind,
                size=st.st_size,
                mode=stat.S_IMODE(st.st_mode),
                depth=depth,
            )
            if match is None or match(child.name):
                yield entry
            if not is_dir:
                continue
            if max_depth is not None and depth >= max_depth:
                continue
            if prune is not None and prune(entry):
                continue
            yield from _walk_dir(entry.path, rel, depth + 1)

    yield from _walk_dir(base, "", 0)


def index_tree(
    root: str | os.PathLike[str],
    *,
    include_hidden: bool = True,
    exclude: ExcludeFilter | None = None,
    errors: list[EntryError] | None = None,
) -> dict[str, Entry]:
    """Walk *root* without a depth limit and return ``{relative: Entry}``."""
    return {
        e.relative: e
        for e in walk(root, include_hidden=include_hidden, exclude=exclude, errors=errors)
    }
