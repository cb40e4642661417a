"""Tests for keep-list delete, junk cleanup and bulk rename."""

import os

import pytest

from vasu.cleanup import (
    apply_renames,
    find_junk,
    is_junk,
    plan_keep_delete,
    plan_renames,
    remove_paths,
)
from vasu.exceptions import ErrorKind


class TestKeepDelete:
    def test_plan_excludes_kept_names(self, sample_tree):
        plan = plan_keep_delete(sample_tree, ["src", ".hidden"])
        assert sorted(p.name for p in plan) == ["README.md", "link", "script.sh"]

    def test_remove_paths(self, sample_tree):
        plan = plan_keep_delete(sample_tree, ["README.md"])
        report = remove_paths(plan)
        assert report.errors == []
        assert sorted(os.listdir(sample_tree)) == ["README.md"]

    def test_symlinked_directory_removed_not_followed(self, tmp_path):
        target = tmp_path / "target"
        target.mkdir()
        (target / "precious").write_text("x")
        work = tmp_path / "work"
        work.mkdir()
        os.symlink(target, work / "dirlink")
        remove_paths(plan_keep_delete(work, []))
        assert (target / "precious").exists()
        assert os.listdir(work) == []

    def test_remove_missing_reported(self, tmp_path):
        report = remove_paths([tmp_path / "gone"])
        assert report.removed == []
        assert report.errors[0].kind is ErrorKind.NOT_FOUND


class TestJunk:
    @pytest.mark.parametrize("name", [
        "__pycache__", ".pytest_cache", "target", ".DS_Store", "mod.pyc", "build.log", "a.o",
    ])
    def test_is_junk(self, name):
        assert is_junk(name)

    @pytest.mark.parametrize("name", ["src", "app.py", "logbook.txt", "targets"])
    def test_is_not_junk(self, name):
        assert not is_junk(name)

    def test_find_junk_does_not_descend(self, tmp_path):
        cache = tmp_path / "pkg" / "__pycache__"
        cache.mkdir(parents=True)
        (cache / "mod.cpython-312.pyc").write_text("x")
        (tmp_path / "pkg" / "mod.py").write_text("x")
        (tmp_path / "run.log").write_text("x")
        junk = find_junk(tmp_path)
        assert [e.relative for e in junk] == ["pkg/__pycache__", "run.log"]


class TestRename:
    def test_plan_and_apply(self, tmp_path):
        (tmp_path / "my photo.jpg").write_text("x")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "old photo.jpg").write_text("y")
        plan = plan_renames(tmp_path, " ", "_")
        report = apply_renames(plan)
        assert len(report.renamed) == 2
        assert (tmp_path / "my_photo.jpg").exists()
        assert (tmp_path / "sub" / "old_photo.jpg").exists()

    def test_directories_not_renamed(self, tmp_path):
        (tmp_path / "a b").mkdir()
        (tmp_path / "a b" / "c d.txt").write_text("x")
        apply_renames(plan_renames(tmp_path, " ", "_"))
        assert (tmp_path / "a b" / "c_d.txt").exists()

    def test_dry_run(self, tmp_path):
        (tmp_path / "a-1.txt").write_text("x")
        report = apply_renames(plan_renames(tmp_path, "-", "_"), dry_run=True)
        assert [(o.name, n.name) for o, n in report.renamed] == [("a-1.txt", "a_1.txt")]
        assert (tmp_path / "a-1.txt").exists()

    def test_existing_target_is_conflict(self, tmp_path):
        (tmp_path / "a-1.txt").write_text("mine")
        (tmp_path / "a_1.txt").write_text("theirs")
        report = apply_renames(plan_renames(tmp_path, "-", "_"))
        assert report.renamed == []
        assert report.conflicts[0].kind is ErrorKind.CONFLICT
        assert (tmp_path / "a_1.txt").read_text() == "theirs"

    def test_empty_pattern_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            plan_renames(tmp_path, "", "x")
