"""Tests for ExcludeFilter and its use by copy and diff."""

import pytest

from vasu import ExcludeFilter, copy_tree, diff_trees
from vasu.diff import DiffTag


# ---------------------------------------------------------------------------
# Unit tests for ExcludeFilter
# ---------------------------------------------------------------------------

class TestExcludeFilter:
    def test_no_patterns_excludes_nothing(self):
        assert ExcludeFilter().is_excluded("foo.pyc") is False

    def test_exclude_pattern_match(self):
        ef = ExcludeFilter(patterns=["*.pyc"])
        assert ef.is_excluded("foo.pyc") is True
        assert ef.is_excluded("sub/bar.pyc") is True
        assert ef.is_excluded("foo.py") is False

    def test_exclude_directory_pattern(self):
        ef = ExcludeFilter(patterns=["build/"])
        assert ef.is_excluded("build", is_dir=True) is True
        assert ef.is_excluded("build", is_dir=False) is False

    def test_negation_pattern(self):
        ef = ExcludeFilter(patterns=["*.pyc", "!important.pyc"])
        assert ef.is_excluded("foo.pyc") is True
        assert ef.is_excluded("important.pyc") is False

    def test_anchored_pattern(self):
        ef = ExcludeFilter(patterns=["/build"])
        assert ef.is_excluded("build") is True
        assert ef.is_excluded("src/build") is False

    def test_exclude_from_file(self, tmp_path):
        pfile = tmp_path / "excludes.txt"
        pfile.write_text("*.log\n# comment\n__pycache__/\n")
        ef = ExcludeFilter(exclude_from=str(pfile))
        assert ef.is_excluded("app.log") is True
        assert ef.is_excluded("__pycache__", is_dir=True) is True
        assert ef.is_excluded("app.py") is False

    def test_gitignore_loading(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*.log\n")
        ef = ExcludeFilter(gitignore=True)
        ef.enter_directory(tmp_path, "")
        assert ef.is_excluded_in_walk("debug.log") is True
        assert ef.is_excluded_in_walk("app.py") is False
        assert ef.is_excluded_in_walk(".gitignore") is False

    def test_nested_gitignore_scoped_to_its_directory(self, tmp_path):
        sub = tmp_path / "sub"
        sub.mkdir()
        (tmp_path / ".gitignore").write_text("*.log\n")
        (sub / ".gitignore").write_text("*.tmp\n")
        ef = ExcludeFilter(gitignore=True)
        ef.enter_directory(tmp_path, "")
        ef.enter_directory(sub, "sub")
        assert ef.is_excluded_in_walk("sub/debug.log") is True
        assert ef.is_excluded_in_walk("sub/temp.tmp") is True
        assert ef.is_excluded_in_walk("temp.tmp") is False

    def test_three_level_negation_deepest_wins(self, tmp_path):
        sub = tmp_path / "sub"
        deep = sub / "deep"
        deep.mkdir(parents=True)
        (tmp_path / ".gitignore").write_text("*.log\n")
        (sub / ".gitignore").write_text("!debug.log\n")
        (deep / ".gitignore").write_text("debug.log\n")
        ef = ExcludeFilter(gitignore=True)
        ef.enter_directory(tmp_path, "")
        ef.enter_directory(sub, "sub")
        ef.enter_directory(deep, "sub/deep")
        assert ef.is_excluded_in_walk("app.log") is True
        assert ef.is_excluded_in_walk("sub/debug.log") is False
        assert ef.is_excluded_in_walk("sub/app.log") is True
        assert ef.is_excluded_in_walk("sub/deep/debug.log") is True

    def test_new_root_drops_previous_rules(self, tmp_path):
        a = tmp_path / "a"
        b = tmp_path / "b"
        a.mkdir()
        b.mkdir()
        (a / ".gitignore").write_text("*.log\n")
        (b / ".gitignore").write_text("*.tmp\n")
        ef = ExcludeFilter(gitignore=True)
        ef.enter_directory(a, "")
        assert ef.is_excluded_in_walk("x.log") is True
        ef.enter_directory(b, "")
        assert ef.is_excluded_in_walk("x.log") is False
        assert ef.is_excluded_in_walk("y.tmp") is True

    def test_combined_patterns_and_gitignore(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*.log\n")
        ef = ExcludeFilter(patterns=["*.pyc"], gitignore=True)
        ef.enter_directory(tmp_path, "")
        assert ef.is_excluded_in_walk("foo.pyc") is True
        assert ef.is_excluded_in_walk("debug.log") is True
        assert ef.is_excluded_in_walk("app.py") is False


# ---------------------------------------------------------------------------
# Integration with the engines
# ---------------------------------------------------------------------------

class TestEnginesWithExclude:
    @pytest.fixture
    def proj(self, tmp_path):
        root = tmp_path / "proj"
        (root / "__pycache__").mkdir(parents=True)
        (root / "__pycache__" / "mod.cpython-312.pyc").write_text("compiled")
        (root / "app.py").write_text("code")
        (root / "debug.log").write_text("log")
        return root

    def test_copy_skips_excluded(self, proj, tmp_path):
        dst = tmp_path / "out"
        ef = ExcludeFilter(patterns=["__pycache__/", "*.log"])
        report = copy_tree(proj, dst, exclude=ef)
        assert report.ok
        assert (dst / "app.py").read_text() == "code"
        assert not (dst / "debug.log").exists()
        assert not (dst / "__pycache__").exists()

    def test_diff_ignores_excluded(self, proj, tmp_path):
        other = tmp_path / "other"
        other.mkdir()
        (other / "app.py").write_text("code")
        report = diff_trees(proj, other, exclude=ExcludeFilter(patterns=["__pycache__/", "*.log"]))
        assert report.identical

    def test_diff_reads_each_sides_gitignore(self, tmp_path):
        a = tmp_path / "a"
        b = tmp_path / "b"
        a.mkdir()
        b.mkdir()
        (a / ".gitignore").write_text("*.log\n")
        (a / "x.log").write_text("log")
        (b / ".gitignore").write_text("*.tmp\n")
        (b / "y.tmp").write_text("tmp")

        ef = ExcludeFilter(gitignore=True)
        forward = {r.path: r.tag for r in diff_trees(a, b, exclude=ef).records}
        backward = {r.path: r.tag for r in diff_trees(b, a, exclude=ef).records}
        assert forward == {".gitignore": DiffTag.MODIFIED}
        assert backward == forward
