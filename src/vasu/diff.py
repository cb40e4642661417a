"""Compare two directory trees path by path."""

from __future__ import annotations

import os
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from .exceptions import EntryError
from .hashing import DEFAULT_ALGORITHM, digest_files
from .walk import Entry, index_tree

if TYPE_CHECKING:
    from ._exclude import ExcludeFilter


class DiffTag(str, Enum):
    """Classification of a path: ``ADDED``, ``REMOVED``, ``MODIFIED``, ``UNCHANGED``."""
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass(frozen=True)
class DiffRecord:
    """One relative path and how it differs between the two trees.

    Attributes:
        path: Relative path (``/``-separated).
        tag: :class:`DiffTag` for the path.
        digests: ``(a_digest, b_digest)`` when both sides are regular files.
    """
    path: str
    tag: DiffTag
    digests: tuple[str, str] | None = None


@dataclass
class DiffReport:
    """Result of :func:`diff_trees`.

    Attributes:
        records: One record per path in either tree, sorted by path.
        errors: Paths that could not be read or hashed (left out of *records*).
    """
    records: list[DiffRecord] = field(default_factory=list)
    errors: list[EntryError] = field(default_factory=list)

    @property
    def identical(self) -> bool:
        """``True`` if every record is unchanged and nothing failed."""
        return not self.errors and all(r.tag is DiffTag.UNCHANGED for r in self.records)

    @property
    def changes(self) -> list[DiffRecord]:
        """Records whose tag is not ``UNCHANGED``."""
        return [r for r in self.records if r.tag is not DiffTag.UNCHANGED]

    def counts(self) -> dict[DiffTag, int]:
        """Return ``{tag: count}`` for every tag, zero counts included."""
        c = Counter(r.tag for r in self.records)
        return {tag: c.get(tag, 0) for tag in DiffTag}


def _side_errors(root: str | os.PathLike[str], errors: list[EntryError]) -> list[EntryError]:
    """Re-label relative error paths with the root they came from."""
    return [
        EntryError(path=os.path.join(os.fspath(root), e.path), error=e.error, kind=e.kind)
        for e in errors
    ]


def _compare_links(rel: str, ea: Entry, eb: Entry, errors: list[EntryError]) -> DiffTag | None:
    try:
        same = os.readlink(ea.path) == os.readlink(eb.path)
    except OSError as exc:
        errors.append(EntryError.from_os_error(rel, exc))
        return None
    return DiffTag.UNCHANGED if same else DiffTag.MODIFIED


def diff_trees(
    a: str | os.PathLike[str],
    b: str | os.PathLike[str],
    *,
    jobs: int = 1,
    algorithm: str = DEFAULT_ALGORITHM,
    compare_mode: bool = False,
    exclude: ExcludeFilter | None = None,
) -> DiffReport:
    """Classify every relative path under *a* and *b*.

    Only in *a* is ``REMOVED``, only in *b* is ``ADDED``.  Two regular
    files are compared by content digest (and by permission bits when
    *compare_mode* is set); two directories are always ``UNCHANGED``; two
    symlinks compare by target text; entries of different kinds are
    ``MODIFIED``.  Both trees are walked with hidden entries included and
    no depth limit.  Nothing is written.
    """
    walk_a: list[EntryError] = []
    walk_b: list[EntryError] = []
    # index_tree finishes one walk before the next starts, so a shared
    # exclude filter reloads .gitignore files for each root.
    index_a = index_tree(a, exclude=exclude, errors=walk_a)
    index_b = index_tree(b, exclude=exclude, errors=walk_b)

    both_files = sorted(
        rel for rel, ea in index_a.items()
        if ea.is_file and rel in index_b and index_b[rel].is_file
    )
    hash_a: list[EntryError] = []
    hash_b: list[EntryError] = []
    digests_a = digest_files(((rel, index_a[rel].path) for rel in both_files),
                             algorithm=algorithm, jobs=jobs, errors=hash_a)
    digests_b = digest_files(((rel, index_b[rel].path) for rel in both_files),
                             algorithm=algorithm, jobs=jobs, errors=hash_b)

    report = DiffReport()
    report.errors.extend(_side_errors(a, walk_a + hash_a))
    report.errors.extend(_side_errors(b, walk_b + hash_b))
    link_errors: list[EntryError] = []

    for rel in sorted(set(index_a) | set(index_b)):
        ea = index_a.get(rel)
        eb = index_b.get(rel)
        if eb is None:
            report.records.append(DiffRecord(rel, DiffTag.REMOVED))
        elif ea is None:
            report.records.append(DiffRecord(rel, DiffTag.ADDED))
        elif ea.kind is not eb.kind:
            report.records.append(DiffRecord(rel, DiffTag.MODIFIED))
        elif ea.is_dir:
            report.records.append(DiffRecord(rel, DiffTag.UNCHANGED))
        elif ea.is_symlink:
            tag = _compare_links(rel, ea, eb, link_errors)
            if tag is not None:
                report.records.append(DiffRecord(rel, tag))
        else:
            da = digests_a.get(rel)
            db = digests_b.get(rel)
            if da is None or db is None:
                continue
            same = da == db and (not compare_mode or ea.mode == eb.mode)
            tag = DiffTag.UNCHANGED if same else DiffTag.MODIFIED
            report.records.append(DiffRecord(rel, tag, (da, db)))

    report.errors.extend(link_errors)
    return report
