"""Clipboard support for ``vasu cb``: gather files, join their text, hand it to a clipboard tool."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Sequence

from ._glob import compile_pattern
from .exceptions import VasuError
from .walk import walk

# Tried in order; the first one that exits 0 wins.
CLIPBOARD_TOOLS: tuple[tuple[str, ...], ...] = (
    ("termux-clipboard-set",),
    ("pbcopy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("wl-copy",),
    ("clip",),
)


class ClipboardUnavailable(VasuError):
    """Raised when none of the clipboard tools could take the text."""


def copy_to_clipboard(text: str, tools: Sequence[Sequence[str]] = CLIPBOARD_TOOLS,
                      *, timeout: float = 5) -> str:
    """Pipe *text* into the first working clipboard tool and return its name."""
    data = text.encode("utf-8")
    for cmd in tools:
        try:
            proc = subprocess.run(
                list(cmd), input=data, timeout=timeout,
                stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL,
            )
        except (OSError, subprocess.TimeoutExpired):
            continue
        if proc.returncode == 0:
            return cmd[0]
    raise ClipboardUnavailable("No clipboard tool found")


def collect_files(targets: Sequence[str], *, base: str | os.PathLike[str] = ".",
                  include_hidden: bool = False) -> list[Path]:
    """Resolve *targets* to a de-duplicated list of files.

    A directory contributes every file below it, a file contributes
    itself, and anything else is treated as a name pattern matched
    against the entries under *base* (matching directories contribute
    their files).  Order follows the targets, then walk order.
    """
    seen: set[Path] = set()
    files: list[Path] = []

    def _add(p: Path) -> None:
        if p not in seen:
            seen.add(p)
            files.append(p)

    def _add_tree(root: Path) -> None:
        for entry in walk(root, include_hidden=include_hidden):
            if entry.is_file:
                _add(entry.path)

    for target in targets or (".",):
        p = Path(target)
        if p.is_dir():
            _add_tree(p)
        elif p.is_file():
            _add(p)
        else:
            matches = compile_pattern(target)
            # A matched directory is collected whole, so the pattern walk
            # does not descend into it.
            for entry in walk(base, include_hidden=include_hidden, match=matches,
                              prune=lambda e: matches(e.name)):
                if entry.is_file:
                    _add(entry.path)
                elif entry.is_dir:
                    _add_tree(entry.path)
    return files


def join_files(files: Sequence[Path], *, header: bool = True) -> tuple[str, int]:
    """Concatenate the text of *files*, returning ``(text, files_used)``.

    Files that are not valid UTF-8 or cannot be read are left out.
    """
    parts = []
    for fp in files:
        try:
            content = fp.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            continue
        parts.append(f"\n\n# ─── {fp} ───\n\n{content}" if header else content)
    return "\n".join(parts), len(parts)
