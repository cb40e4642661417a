"""Find files with identical content under a directory."""

from __future__ import annotations

import os
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .exceptions import EntryError
from .hashing import DEFAULT_ALGORITHM, digest_files
from .walk import Entry, walk

if TYPE_CHECKING:
    from ._exclude import ExcludeFilter


@dataclass
class DuplicateGroup:
    """Files sharing one content digest.

    Attributes:
        digest: Hex content digest shared by every member.
        size: Size in bytes of each member.
        paths: Absolute paths of the members, in walk order.
    """
    digest: str
    size: int
    paths: list[Path] = field(default_factory=list)

    @property
    def extra_copies(self) -> int:
        return len(self.paths) - 1

    @property
    def wasted(self) -> int:
        """Bytes that would be freed by keeping a single copy."""
        return self.extra_copies * self.size


@dataclass
class DedupReport:
    """Result of :func:`find_duplicates`.

    Attributes:
        groups: Groups of two or more members, largest waste first.
        errors: Files that could not be read.
        scanned: Number of regular files walked.
    """
    groups: list[DuplicateGroup] = field(default_factory=list)
    errors: list[EntryError] = field(default_factory=list)
    scanned: int = 0

    @property
    def extra_copies(self) -> int:
        return sum(g.extra_copies for g in self.groups)

    @property
    def wasted(self) -> int:
        return sum(g.wasted for g in self.groups)


def find_duplicates(
    root: str | os.PathLike[str],
    *,
    jobs: int = 1,
    algorithm: str = DEFAULT_ALGORITHM,
    include_hidden: bool = True,
    min_size: int = 0,
    exclude: ExcludeFilter | None = None,
) -> DedupReport:
    """Group the regular files under *root* by content digest.

    Directories and symlinks are ignored.  Zero-byte files are included
    (and therefore all group together) unless *min_size* excludes them.
    A file whose size no other file shares cannot have a duplicate, so it
    is never hashed.

    Groups are ordered by wasted space, largest first, then by digest.
    """
    report = DedupReport()
    files: list[Entry] = []
    for entry in walk(root, include_hidden=include_hidden, exclude=exclude,
                      errors=report.errors):
        if entry.is_file:
            files.append(entry)
    report.scanned = len(files)

    size_counts: dict[int, int] = defaultdict(int)
    for entry in files:
        size_counts[entry.size] += 1
    candidates = [
        e for e in files
        if e.size >= min_size and size_counts[e.size] > 1
    ]

    digests = digest_files(((e.relative, e.path) for e in candidates),
                           algorithm=algorithm, jobs=jobs, errors=report.errors)

    by_digest: dict[str, DuplicateGroup] = {}
    for entry in candidates:
        digest = digests.get(entry.relative)
        if digest is None:
            continue
        group = by_digest.get(digest)
        if group is None:
            group = by_digest[digest] = DuplicateGroup(digest=digest, size=entry.size)
        group.paths.append(entry.path)

    report.groups = sorted(
        (g for g in by_digest.values() if len(g.paths) > 1),
        key=lambda g: (-g.wasted, g.digest),
    )
    return report
