"""Tests for clipboard collection and tool selection."""

import subprocess

import pytest

from vasu import clipboard
from vasu.clipboard import ClipboardUnavailable, collect_files, copy_to_clipboard, join_files


class _FakeRun:
    """Stands in for subprocess.run; *outcomes* maps tool name to a return code or exception."""

    def __init__(self, outcomes):
        self.outcomes = outcomes
        self.calls = []

    def __call__(self, cmd, input=None, **kwargs):
        self.calls.append((cmd, input))
        outcome = self.outcomes.get(cmd[0], FileNotFoundError(cmd[0]))
        if isinstance(outcome, BaseException):
            raise outcome
        return subprocess.CompletedProcess(cmd, outcome)


class TestCopyToClipboard:
    def test_first_working_tool_wins(self, monkeypatch):
        fake = _FakeRun({"pbcopy": 1, "xclip": 0, "xsel": 0})
        monkeypatch.setattr(clipboard.subprocess, "run", fake)
        assert copy_to_clipboard("héllo") == "xclip"
        assert fake.calls[-1] == (["xclip", "-selection", "clipboard"], "héllo".encode())
        assert [c[0][0] for c in fake.calls] == ["termux-clipboard-set", "pbcopy", "xclip"]

    def test_timeout_skipped(self, monkeypatch):
        fake = _FakeRun({
            "termux-clipboard-set": subprocess.TimeoutExpired("termux-clipboard-set", 5),
            "pbcopy": 0,
        })
        monkeypatch.setattr(clipboard.subprocess, "run", fake)
        assert copy_to_clipboard("x") == "pbcopy"

    def test_none_available(self, monkeypatch):
        monkeypatch.setattr(clipboard.subprocess, "run", _FakeRun({}))
        with pytest.raises(ClipboardUnavailable):
            copy_to_clipboard("x")


class TestCollectFiles:
    def test_directory_target(self, sample_tree):
        files = collect_files([str(sample_tree / "src")])
        assert [f.name for f in files] == ["app.py", "util.py"]

    def test_pattern_target(self, sample_tree, monkeypatch):
        monkeypatch.chdir(sample_tree)
        files = collect_files(["*.py", "README.md"])
        assert [f.name for f in files] == ["app.py", "util.py", "README.md"]

    def test_matched_directory_walked_once(self, tmp_path, monkeypatch):
        deep = tmp_path / "a" / "b" / "c"
        deep.mkdir(parents=True)
        (deep / "f.txt").write_text("x")
        (tmp_path / "a" / "g.txt").write_text("y")

        yielded = []
        real_walk = clipboard.walk

        def _walk(root, **kwargs):
            for entry in real_walk(root, **kwargs):
                yielded.append(entry.path)
                yield entry

        monkeypatch.setattr(clipboard, "walk", _walk)
        files = collect_files(["*"], base=tmp_path)
        assert sorted(f.name for f in files) == ["f.txt", "g.txt"]
        assert yielded.count(deep / "f.txt") == 1
        assert yielded.count(tmp_path / "a" / "g.txt") == 1

    def test_no_duplicates(self, sample_tree):
        src = str(sample_tree / "src")
        files = collect_files([src, src + "/app.py"])
        assert len(files) == 2

    def test_hidden_only_with_flag(self, sample_tree):
        assert ".hidden" not in [f.name for f in collect_files([str(sample_tree)])]
        assert ".hidden" in [
            f.name for f in collect_files([str(sample_tree)], include_hidden=True)
        ]


class TestJoinFiles:
    def test_headers(self, sample_tree):
        readme = sample_tree / "README.md"
        text, used = join_files([readme])
        assert used == 1
        assert f"# ─── {readme} ───" in text
        assert "# readme" in text

    def test_no_header_and_binary_skipped(self, tmp_path):
        a = tmp_path / "a.txt"
        a.write_text("alpha")
        b = tmp_path / "b.bin"
        b.write_bytes(b"\xff\xfe\xfd")
        text, used = join_files([a, b], header=False)
        assert used == 1
        assert text == "alpha"
