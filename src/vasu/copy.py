"""Deep copy of a file or directory tree.

Directories, regular files (bytes and permission bits) and symlinks
(target text, never followed) are replicated from a source root into a
destination root.  Existing destination entries are conflicts unless
``overwrite`` is set; conflicts and per-entry I/O failures are collected
in a :class:`CopyReport` while the rest of the tree is still copied.
"""

from __future__ import annotations

import os
import shutil
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .exceptions import (
    ConflictError,
    EntryError,
    ErrorKind,
    NotFoundError,
    error_from_os,
)
from .walk import Entry, EntryKind, check_root, walk

if TYPE_CHECKING:
    from ._exclude import ExcludeFilter


@dataclass
class CopyReport:
    """Result of a copy.

    Attributes:
        copied: Source entries written (or, for a dry run, that would be).
        conflicts: Entries skipped because the destination already existed.
        errors: Entries that failed with an I/O error.
    """
    copied: list[Entry] = field(default_factory=list)
    conflicts: list[EntryError] = field(default_factory=list)
    errors: list[EntryError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """``True`` if nothing was skipped and nothing failed."""
        return not self.conflicts and not self.errors

    @property
    def total(self) -> int:
        """Number of entries considered: copied + skipped + failed."""
        return len(self.copied) + len(self.conflicts) + len(self.errors)


def _conflict(rel: str, message: str = "destination exists") -> EntryError:
    return EntryError(path=rel, error=message, kind=ErrorKind.CONFLICT)


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


def _copy_entry(entry: Entry, target: Path, rel: str, report: CopyReport, *,
                overwrite: bool, dry_run: bool,
                dir_modes: list[tuple[Path, int]]) -> bool:
    """Copy one entry to *target*; return False if it was skipped or failed."""
    exists = os.path.lexists(target)
    try:
        if entry.kind is EntryKind.DIRECTORY:
            if exists and _is_real_dir(target):
                dir_modes.append((target, entry.mode))
                return True
            if exists:
                if not overwrite:
                    report.conflicts.append(_conflict(rel))
                    return False
                if not dry_run:
                    target.unlink()
            if not dry_run:
                target.mkdir()
            dir_modes.append((target, entry.mode))
            report.copied.append(entry)
            return True

        if exists:
            if _is_real_dir(target):
                if not overwrite:
                    report.conflicts.append(_conflict(rel))
                else:
                    report.errors.append(EntryError(
                        path=rel, error="cannot overwrite a directory with a file",
                        kind=ErrorKind.CONFLICT,
                    ))
                return False
            if not overwrite:
                report.conflicts.append(_conflict(rel))
                return False
            if not dry_run:
                target.unlink()

        if not dry_run:
            if entry.kind is EntryKind.SYMLINK:
                os.symlink(os.readlink(entry.path), target)
            else:
                shutil.copyfile(entry.path, target)
                os.chmod(target, entry.mode)
        report.copied.append(entry)
        return True
    except OSError as exc:
        report.errors.append(EntryError.from_os_error(rel, exc))
        return False


def _single_entry(path: Path) -> Entry:
    st = path.lstat()
    kind = EntryKind.from_mode(st.st_mode) or EntryKind.FILE
    return Entry(path=path.absolute(), relative=path.name, kind=kind,
                 size=st.st_size, mode=stat.S_IMODE(st.st_mode), depth=0)


def _copy_file(src: Path, dst: Path, *, overwrite: bool, dry_run: bool) -> CopyReport:
    """Copy a single file or symlink; *dst* may be an existing directory."""
    entry = _single_entry(src)
    target = dst / src.name if _is_real_dir(dst) else dst
    if not dry_run:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise error_from_os(exc, f"Cannot create {target.parent}", path=str(target.parent))
    report = CopyReport()
    _copy_entry(entry, target, str(target), report,
                overwrite=overwrite, dry_run=dry_run, dir_modes=[])
    return report


def copy_tree(
    src: str | os.PathLike[str],
    dst: str | os.PathLike[str],
    *,
    overwrite: bool = False,
    exclude: ExcludeFilter | None = None,
    dry_run: bool = False,
) -> CopyReport:
    """Copy *src* into *dst* and return a :class:`CopyReport`.

    When *src* is a directory, its contents are replicated under *dst*
    (hidden entries included, symlinks recreated, permission bits
    preserved).  Existing directories in *dst* are merged into; any other
    existing entry is a conflict unless *overwrite* is set.  A conflicting
    directory's subtree is skipped along with it.

    When *src* is a file or symlink, it is copied to *dst*, or into *dst*
    if that is an existing directory.

    Raises :class:`~vasu.exceptions.NotFoundError` if *src* does not
    exist, and a :class:`~vasu.exceptions.VasuError` if the destination
    root cannot be created.
    """
    src_path = Path(src)
    dst_path = Path(dst)
    if not os.path.lexists(src_path):
        raise NotFoundError(f"Source not found: {src_path}", path=str(src_path))
    if not _is_real_dir(src_path):
        return _copy_file(src_path, dst_path, overwrite=overwrite, dry_run=dry_run)

    src_root = check_root(src_path)
    dst_root = dst_path.absolute()
    if not dry_run:
        try:
            dst_root.mkdir(parents=True, exist_ok=True)
        except FileExistsError:
            raise ConflictError(f"Destination is not a directory: {dst_root}", path=str(dst_root))
        except OSError as exc:
            raise error_from_os(exc, f"Cannot create destination {dst_root}", path=str(dst_root))

    dst_resolved = dst_root.resolve()

    def _is_destination(entry: Entry) -> bool:
        return entry.is_dir and entry.path.resolve() == dst_resolved

    report = CopyReport()
    dir_modes: list[tuple[Path, int]] = [(dst_root, stat.S_IMODE(src_root.stat().st_mode))]
    blocked: list[str] = []

    for entry in walk(src_root, include_hidden=True, exclude=exclude,
                      prune=_is_destination, errors=report.errors):
        if _is_destination(entry):
            continue
        if any(entry.relative.startswith(b + "/") for b in blocked):
            continue
        copied = _copy_entry(entry, dst_root / entry.relative, entry.relative, report,
                             overwrite=overwrite, dry_run=dry_run, dir_modes=dir_modes)
        if not copied and entry.is_dir:
            blocked.append(entry.relative)

    # Directory modes last, deepest first, so read-only directories
    # don't block writing their own contents.
    if not dry_run:
        for path, mode in reversed(dir_modes):
            try:
                os.chmod(path, mode)
            except OSError as exc:
                rel = path.relative_to(dst_root).as_posix() if path != dst_root else "."
                report.errors.append(EntryError.from_os_error(rel, exc))
    return report
