"""Destructive maintenance helpers: keep-list delete, junk cleanup, bulk rename.

Each operation is split into a *plan* step that only reads the
filesystem (so the CLI can preview and confirm) and an *apply* step that
returns a report of what succeeded and what failed.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import EntryError, ErrorKind, error_from_os
from .walk import Entry, check_root, scan_dir, walk

JUNK_NAMES = frozenset({
    "__pycache__", ".pytest_cache", ".mypy_cache", ".ruff_cache",
    "target", ".DS_Store", "Thumbs.db", ".eggs",
})
JUNK_SUFFIXES = (".pyc", ".pyo", ".class", ".o", ".obj", ".log")


@dataclass
class RemovalReport:
    """Result of :func:`remove_paths`."""
    removed: list[Path] = field(default_factory=list)
    errors: list[EntryError] = field(default_factory=list)


@dataclass
class RenameReport:
    """Result of :func:`apply_renames`.

    Attributes:
        renamed: ``(old, new)`` pairs that were (or, dry-run, would be) renamed.
        conflicts: Renames skipped because the new name already exists.
        errors: Renames that failed with an I/O error.
    """
    renamed: list[tuple[Path, Path]] = field(default_factory=list)
    conflicts: list[EntryError] = field(default_factory=list)
    errors: list[EntryError] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------

def plan_keep_delete(directory: str | os.PathLike[str], keep: list[str]) -> list[Path]:
    """Return the immediate children of *directory* whose names are not in *keep*."""
    root = check_root(directory)
    keep_set = set(keep)
    try:
        children = scan_dir(root)
    except OSError as exc:
        raise error_from_os(exc, f"Cannot read {root}", path=str(root))
    return [Path(e.path) for e in children if e.name not in keep_set]


def is_junk(name: str) -> bool:
    """Return True for build artifacts and OS litter."""
    return name in JUNK_NAMES or name.endswith(JUNK_SUFFIXES)


def find_junk(directory: str | os.PathLike[str],
              errors: list[EntryError] | None = None) -> list[Entry]:
    """Return junk entries under *directory*; junk directories are not descended."""
    return [
        entry for entry in walk(directory, include_hidden=True,
                                prune=lambda e: is_junk(e.name), errors=errors)
        if is_junk(entry.name)
    ]


def plan_renames(directory: str | os.PathLike[str], pattern: str,
                 replacement: str) -> list[tuple[Path, Path]]:
    """Return ``(old, new)`` pairs for files whose name contains *pattern*.

    Only the file name is rewritten; directories are walked but never
    renamed themselves.
    """
    if not pattern:
        raise ValueError("Pattern must not be empty")
    plan = []
    for entry in walk(directory, include_hidden=True):
        if entry.is_dir or pattern not in entry.name:
            continue
        new_name = entry.name.replace(pattern, replacement)
        plan.append((entry.path, entry.path.with_name(new_name)))
    return plan


# ---------------------------------------------------------------------------
# Applying
# ---------------------------------------------------------------------------

def remove_paths(paths: list[Path]) -> RemovalReport:
    """Remove each path (directories recursively; symlinks are not followed)."""
    report = RemovalReport()
    for p in paths:
        try:
            if p.is_dir() and not p.is_symlink():
                shutil.rmtree(p)
            else:
                p.unlink()
        except OSError as exc:
            report.errors.append(EntryError.from_os_error(str(p), exc))
        else:
            report.removed.append(p)
    return report


def apply_renames(plan: list[tuple[Path, Path]], *, dry_run: bool = False) -> RenameReport:
    """Rename every ``(old, new)`` pair, never replacing an existing file."""
    report = RenameReport()
    for old, new in plan:
        if new != old and os.path.lexists(new):
            report.conflicts.append(EntryError(
                path=str(old), error=f"{new.name} already exists", kind=ErrorKind.CONFLICT,
            ))
            continue
        if not dry_run:
            try:
                old.rename(new)
            except OSError as exc:
                report.errors.append(EntryError.from_os_error(str(old), exc))
                continue
        report.renamed.append((old, new))
    return report
