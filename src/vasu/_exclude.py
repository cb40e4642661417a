"""Exclude-filter support for tree walks.

Combines ``--exclude`` patterns, ``--exclude-from`` files, and optional
per-directory ``.gitignore`` loading into a single predicate consulted
by :func:`vasu.walk.walk` for every entry.

Pattern syntax follows gitignore rules (implemented by
``dulwich.ignore.IgnoreFilter``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from dulwich.ignore import IgnoreFilter


class ExcludeFilter:
    """Combines --exclude patterns, --exclude-from, and .gitignore files."""

    def __init__(
        self,
        *,
        patterns: Sequence[str] | None = None,
        exclude_from: str | None = None,
        gitignore: bool = False,
    ) -> None:
        base_lines: list[bytes] = []
        for p in patterns or ():
            base_lines.append(p.encode("utf-8"))
        if exclude_from is not None:
            for raw in Path(exclude_from).read_bytes().splitlines():
                line = raw.strip()
                if line and not line.startswith(b"#"):
                    base_lines.append(line)
        self._base: IgnoreFilter | None = (
            IgnoreFilter(base_lines) if base_lines else None
        )
        self._gitignore = gitignore
        # {rel_dir: IgnoreFilter | None} for the current walk root
        self._dir_filters: dict[str, IgnoreFilter | None] = {}

    def is_excluded(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check *rel_path* against the base patterns only."""
        if self._base is None:
            return False
        check = rel_path + "/" if is_dir else rel_path
        return self._base.is_ignored(check) is True

    def enter_directory(self, abs_dir: Path, rel_dir: str) -> None:
        """Load ``.gitignore`` from *abs_dir* if gitignore mode is on.

        Entering a walk root (empty *rel_dir*) drops the rules loaded for any
        previous root, so one filter can serve several walks in turn.
        """
        if not self._gitignore:
            return
        if not rel_dir:
            self._dir_filters.clear()
        elif rel_dir in self._dir_filters:
            return
        gi = abs_dir / ".gitignore"
        if gi.is_file():
            self._dir_filters[rel_dir] = IgnoreFilter.from_path(str(gi))
        else:
            self._dir_filters[rel_dir] = None

    def is_excluded_in_walk(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check base patterns plus the loaded ``.gitignore`` hierarchy.

        ``enter_directory`` must have been called for every ancestor of
        *rel_path* (the walker does this before listing a directory).
        """
        if self.is_excluded(rel_path, is_dir=is_dir):
            return True
        if not self._gitignore:
            return False

        # Each filter checks the path relative to its own directory,
        # deepest first; the first definite answer wins.
        parts = rel_path.split("/")
        for depth in reversed(range(len(parts))):
            dir_key = "/".join(parts[:depth])
            filt = self._dir_filters.get(dir_key)
            if filt is None:
                continue
            sub = "/".join(parts[depth:])
            result = filt.is_ignored(sub + "/" if is_dir else sub)
            if result is True:
                return True
            if result is False:
                return False
        return False
