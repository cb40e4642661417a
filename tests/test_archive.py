"""Tests for zip, unzip and backup."""

import datetime
import os
import stat
import zipfile

import pytest

from vasu import IoFailureError, NotFoundError
from vasu.archive import (
    backup,
    backup_name,
    default_archive_name,
    extract_archive,
    zip_path,
)
from vasu.exceptions import ErrorKind


class TestZip:
    def test_names_relative_to_parent(self, sample_tree, tmp_path):
        out = tmp_path / "proj.zip"
        report = zip_path(sample_tree, out)
        assert report.errors == []
        with zipfile.ZipFile(out) as zf:
            names = set(zf.namelist())
        assert "proj/README.md" in names
        assert "proj/.hidden" in names
        assert "proj/src/app.py" in names
        assert report.files == 6

    def test_single_file(self, sample_tree, tmp_path):
        out = tmp_path / "one.zip"
        report = zip_path(sample_tree / "README.md", out)
        assert report.files == 1
        with zipfile.ZipFile(out) as zf:
            assert zf.namelist() == ["README.md"]

    def test_output_inside_source_skipped(self, sample_tree):
        out = sample_tree / "proj.zip"
        zip_path(sample_tree, out)
        with zipfile.ZipFile(out) as zf:
            assert "proj/proj.zip" not in zf.namelist()

    def test_missing_source(self, tmp_path):
        with pytest.raises(NotFoundError):
            zip_path(tmp_path / "nope", tmp_path / "x.zip")

    def test_default_names(self, sample_tree):
        assert default_archive_name(sample_tree) == "proj.zip"
        when = datetime.datetime(2024, 3, 5, 7, 8, 9)
        assert backup_name(sample_tree, when) == "proj_20240305_070809.zip"


class TestUnzip:
    def test_round_trip_keeps_modes_and_links(self, sample_tree, tmp_path):
        out = tmp_path / "proj.zip"
        zip_path(sample_tree, out)
        dest = tmp_path / "restored"
        report = extract_archive(out, dest)
        assert report.errors == []
        restored = dest / "proj"
        assert (restored / "src" / "util.py").read_text() == "x = 1\ny = 2\n"
        assert stat.S_IMODE((restored / "script.sh").stat().st_mode) == 0o755
        assert os.readlink(restored / "link") == "README.md"

    def test_escaping_member_refused(self, tmp_path):
        out = tmp_path / "evil.zip"
        with zipfile.ZipFile(out, "w") as zf:
            zf.writestr("../outside.txt", "x")
            zf.writestr("a/../../up.txt", "x")
            zf.writestr("ok.txt", "fine")
        dest = tmp_path / "dest"
        report = extract_archive(out, dest)
        assert report.files == 1
        assert (dest / "ok.txt").read_text() == "fine"
        assert not (tmp_path / "outside.txt").exists()
        assert {e.path for e in report.errors} == {"../outside.txt", "a/../../up.txt"}
        assert all(e.kind is ErrorKind.PERMISSION_DENIED for e in report.errors)

    def test_not_a_zip(self, tmp_path):
        bad = tmp_path / "bad.zip"
        bad.write_text("plain text")
        with pytest.raises(IoFailureError):
            extract_archive(bad, tmp_path / "dest")

    def test_missing_archive(self, tmp_path):
        with pytest.raises(NotFoundError):
            extract_archive(tmp_path / "nope.zip", tmp_path)


class TestBackup:
    def test_timestamped_archive(self, sample_tree, tmp_path):
        dest = tmp_path / "backups"
        when = datetime.datetime(2024, 1, 2, 3, 4, 5)
        report = backup(sample_tree, dest, now=when)
        assert report.archive == dest / "proj_20240102_030405.zip"
        assert zipfile.is_zipfile(report.archive)
