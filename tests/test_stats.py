"""Tests for human_size, item sizes and line counts."""

import pytest

from vasu.stats import NO_EXTENSION, count_lines, human_size, item_sizes


class TestHumanSize:
    @pytest.mark.parametrize("size, expected", [
        (0, "0.0 B"),
        (1023, "1023.0 B"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (5 * 1024 ** 2, "5.0 MB"),
        (3 * 1024 ** 4, "3.0 TB"),
        (2 * 1024 ** 5, "2.0 PB"),
    ])
    def test_units(self, size, expected):
        assert human_size(size) == expected


class TestItemSizes:
    def test_sorted_largest_first(self, tmp_path):
        (tmp_path / "small.txt").write_bytes(b"x")
        big = tmp_path / "big"
        big.mkdir()
        (big / "a").write_bytes(b"x" * 100)
        (big / "b").write_bytes(b"x" * 50)
        items = item_sizes(tmp_path)
        assert [(i.path.name, i.size, i.is_dir) for i in items] == [
            ("big", 150, True),
            ("small.txt", 1, False),
        ]


class TestCountLines:
    def test_per_extension(self, sample_tree):
        rows = {r.extension: (r.files, r.lines) for r in count_lines(sample_tree)}
        assert rows[".py"] == (2, 3)
        assert rows[".md"] == (1, 1)
        assert rows[".sh"] == (1, 2)
        assert rows[NO_EXTENSION] == (1, 1)

    def test_sorted_by_file_count(self, sample_tree):
        rows = count_lines(sample_tree)
        assert rows[0].extension == ".py"

    def test_extension_filter(self, sample_tree):
        rows = count_lines(sample_tree, ["py", ".MD"])
        assert sorted(r.extension for r in rows) == [".md", ".py"]

    def test_binary_counts_zero_lines(self, tmp_path):
        (tmp_path / "blob.bin").write_bytes(b"\xff\xfe\x00\n\n")
        rows = count_lines(tmp_path)
        assert [(r.extension, r.files, r.lines) for r in rows] == [(".bin", 1, 0)]
