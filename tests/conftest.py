"""Shared fixtures for vasu tests."""

import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from vasu import hashing


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def sample_tree(tmp_path):
    """A small project tree with hidden files, a subdirectory and a symlink.

    \b
    proj/
        .hidden          "secret\\n"
        README.md        "# readme\\n"
        script.sh        0o755
        src/
            app.py       "print('hi')\\n"
            util.py      "x = 1\\ny = 2\\n"
        link -> README.md
    """
    root = tmp_path / "proj"
    root.mkdir()
    (root / ".hidden").write_text("secret\n")
    (root / "README.md").write_text("# readme\n")
    script = root / "script.sh"
    script.write_text("#!/bin/sh\necho hi\n")
    os.chmod(script, 0o755)
    src = root / "src"
    src.mkdir()
    (src / "app.py").write_text("print('hi')\n")
    (src / "util.py").write_text("x = 1\ny = 2\n")
    os.symlink("README.md", root / "link")
    return root


@pytest.fixture
def dupe_tree(tmp_path):
    """``a.txt`` and ``b.txt`` share content; ``c.txt`` differs."""
    root = tmp_path / "x"
    root.mkdir()
    (root / "a.txt").write_text("hi")
    (root / "b.txt").write_text("hi")
    (root / "c.txt").write_text("bye")
    return root


@pytest.fixture
def deny_hash(monkeypatch):
    """Make hashing fail with ``PermissionError`` for chosen paths.

    Returns a callable that adds a path to the denied set.
    """
    denied = set()
    real_digest = hashing.file_digest

    def _digest(path, algorithm=hashing.DEFAULT_ALGORITHM):
        if Path(path) in denied:
            raise PermissionError(13, "Permission denied", str(path))
        return real_digest(path, algorithm)

    monkeypatch.setattr(hashing, "file_digest", _digest)
    return lambda p: denied.add(Path(p))
