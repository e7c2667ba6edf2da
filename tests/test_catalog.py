"""Tests for the directory catalog."""

import os

import pytest

from facedb.catalog import EntryKind, list_directory, list_files, list_subdirectories
from facedb.errors import PathUnavailable


class TestListDirectory:
    """Test cases for list_directory."""

    def test_only_hidden_entries(self, tmp_path):
        """Directories with only hidden entries list as empty."""
        (tmp_path / ".hidden").write_text("x")
        (tmp_path / ".git").mkdir()

        assert list_directory(tmp_path) == []

    def test_empty_directory(self, tmp_path):
        assert list_directory(tmp_path) == []

    def test_classifies_entries(self, tmp_path):
        """Files and directories are classified, hidden ones skipped."""
        (tmp_path / "image.jpg").write_bytes(b"\xff\xd8")
        (tmp_path / "alice").mkdir()
        (tmp_path / ".DS_Store").write_text("")

        kinds = {entry.name: entry.kind for entry in list_directory(tmp_path)}

        assert kinds == {"image.jpg": EntryKind.FILE, "alice": EntryKind.DIRECTORY}

    def test_symlink_is_other(self, tmp_path):
        """Symbolic links are not followed."""
        (tmp_path / "target").mkdir()
        try:
            os.symlink(tmp_path / "target", tmp_path / "link")
        except (OSError, NotImplementedError):
            pytest.skip("Symbolic links not supported")

        kinds = {entry.name: entry.kind for entry in list_directory(tmp_path)}

        assert kinds["link"] == EntryKind.OTHER
        assert kinds["target"] == EntryKind.DIRECTORY

    def test_missing_directory(self, tmp_path):
        """A missing path raises PathUnavailable."""
        with pytest.raises(PathUnavailable):
            list_directory(tmp_path / "missing")

    def test_file_is_not_a_directory(self, tmp_path):
        path = tmp_path / "file.txt"
        path.write_text("x")

        with pytest.raises(PathUnavailable):
            list_directory(path)

    def test_entries_are_fresh(self, tmp_path):
        """Every call reflects the current directory contents."""
        (tmp_path / "a").mkdir()
        first = list_directory(tmp_path)
        (tmp_path / "b").mkdir()
        second = list_directory(tmp_path)

        assert len(first) == 1
        assert len(second) == 2


class TestFilters:
    """Test cases for the file/directory helpers."""

    def test_list_files_and_subdirectories(self, tmp_path):
        (tmp_path / "one.png").write_bytes(b"")
        (tmp_path / "two.png").write_bytes(b"")
        (tmp_path / "sub").mkdir()

        assert sorted(list_files(tmp_path)) == ["one.png", "two.png"]
        assert list_subdirectories(tmp_path) == ["sub"]
