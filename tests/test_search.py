"""Tests for path and glob expansion."""

from pathlib import Path

import pytest

from davdrop.search import find_files, least_common_ancestor


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "build" / "logs").mkdir(parents=True)
    (tmp_path / "build" / "out.txt").write_text("out")
    (tmp_path / "build" / "logs" / "run.log").write_text("log")
    (tmp_path / "build" / "logs" / "err.log").write_text("err")
    return tmp_path


class TestFindFiles:
    def test_single_file(self, tree):
        result = find_files([str(tree / "build" / "out.txt")])

        assert result.files == [(tree / "build" / "out.txt").resolve()]
        assert result.root_directory == (tree / "build").resolve()

    def test_directory_expands_to_files(self, tree):
        result = find_files([str(tree / "build")])

        names = sorted(f.name for f in result.files)
        assert names == ["err.log", "out.txt", "run.log"]
        assert result.root_directory == (tree / "build").resolve()

    def test_glob(self, tree):
        result = find_files([str(tree / "build" / "**" / "*.log")])

        assert sorted(f.name for f in result.files) == ["err.log", "run.log"]
        assert result.root_directory == (tree / "build" / "logs").resolve()

    def test_deduplicates_preserving_order(self, tree):
        out = str(tree / "build" / "out.txt")
        result = find_files([out, str(tree / "build"), out])

        assert result.files[0].name == "out.txt"
        assert len(result.files) == 3

    def test_no_matches(self, tree):
        result = find_files([str(tree / "nothing" / "*.txt")])

        assert result.files == []
        assert result.root_directory is None


class TestLeastCommonAncestor:
    def test_empty(self):
        assert least_common_ancestor([]) is None

    def test_siblings(self):
        files = [Path("/a/b/x.txt"), Path("/a/b/c/y.txt")]
        assert least_common_ancestor(files) == Path("/a/b")

    def test_does_not_split_names(self):
        files = [Path("/a/bc/x.txt"), Path("/a/bd/y.txt")]
        assert least_common_ancestor(files) == Path("/a")
