"""Filesystem query layer tests."""

import os
from pathlib import Path

import pytest

from rotalog.filez import (
    FileType,
    ListFilter,
    LocalFileSystem,
    delete_file,
    file_type,
    is_directory,
    is_regular_file,
    list_entries,
    path_exists,
    remove_matching,
    rename_file,
    split_path,
)


@pytest.fixture
def populated(tmp_path):
    (tmp_path / "app.log").write_text("main")
    (tmp_path / "app.log.01").write_text("one")
    (tmp_path / "app.log.02").write_text("two")
    (tmp_path / "app.log.01.gz").write_text("zipped")
    (tmp_path / "app.log.001").write_text("wide")
    (tmp_path / ".hidden.log").write_text("dot")
    (tmp_path / "archive").mkdir()
    (tmp_path / ".cache").mkdir()
    return tmp_path


class TestListEntries:
    def test_normal_excludes_hidden(self, populated):
        names = set(list_entries(populated))
        assert "archive" in names
        assert "app.log" in names
        assert ".hidden.log" not in names
        assert ".cache" not in names

    def test_files_only(self, populated):
        names = set(list_entries(populated, ListFilter.FILES))
        assert "archive" not in names
        assert "app.log.02" in names

    def test_dirs_only(self, populated):
        assert sorted(list_entries(populated, ListFilter.DIRS)) == ["archive"]

    def test_all_includes_hidden(self, populated):
        names = set(list_entries(populated, ListFilter.ALL))
        assert ".hidden.log" in names
        assert ".cache" in names

    def test_fixed_width_mask_rejects_extra_characters(self, populated):
        names = sorted(list_entries(populated, ListFilter.FILES, "app.log.[0-9][0-9]"))
        assert names == ["app.log.01", "app.log.02"]

    def test_mask_is_case_sensitive(self, populated):
        assert list_entries(populated, ListFilter.FILES, "APP.LOG") == []

    def test_missing_directory_is_empty(self, tmp_path):
        assert list_entries(tmp_path / "nope") == []

    def test_file_instead_of_directory_is_empty(self, populated):
        assert list_entries(populated / "app.log") == []


class TestPathQueries:
    def test_path_exists(self, populated):
        exists, st = path_exists(populated / "app.log")
        assert exists is True
        assert st.st_size == 4

    def test_path_missing(self, tmp_path):
        assert path_exists(tmp_path / "missing") == (False, None)

    def test_is_regular_file(self, populated):
        assert is_regular_file(populated / "app.log")
        assert not is_regular_file(populated / "archive")
        assert not is_regular_file(populated / "missing")

    def test_is_directory(self, populated):
        assert is_directory(populated / "archive")
        assert not is_directory(populated / "app.log")

    def test_file_type(self, populated):
        assert file_type(populated / "app.log") is FileType.REGULAR
        assert file_type(populated / "archive") is FileType.DIRECTORY
        assert file_type(populated / "missing") is FileType.NONE

    @pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="symlinks")
    def test_file_type_link(self, populated):
        link = populated / "current.log"
        link.symlink_to(populated / "app.log")
        assert file_type(link) is FileType.REGULAR
        assert file_type(link, follow_symlinks=False) is FileType.LINK


class TestSplitPath:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("app.log", (".", "app.log")),
            ("logs/app.log", ("logs", "app.log")),
            ("/var/log/app.log", ("/var/log", "app.log")),
            ("/app.log", ("/", "app.log")),
            ("logs/archive/", ("logs", "archive")),
            ("logs//app.log", ("logs", "app.log")),
            ("///", ("/", "/")),
            ("", (".", ".")),
        ],
    )
    def test_split(self, path, expected):
        assert split_path(path) == expected

    @pytest.mark.skipif(os.sep != "\\" and os.altsep != "\\", reason="backslash is not a separator")
    def test_backslashes_are_separators(self):
        assert split_path("logs\\app.log") == ("logs", "app.log")

    @pytest.mark.skipif(os.sep == "\\" or os.altsep == "\\", reason="backslash is a separator")
    def test_backslash_is_part_of_the_name(self):
        assert split_path("logs\\app.log") == (".", "logs\\app.log")
        assert split_path("var/logs\\app.log") == ("var", "logs\\app.log")

    def test_accepts_pathlike(self):
        assert split_path(Path("logs") / "app.log") == ("logs", "app.log")


class TestMutations:
    def test_delete(self, populated):
        assert delete_file(populated / "app.log") is True
        assert not (populated / "app.log").exists()

    def test_delete_missing_returns_false(self, tmp_path):
        assert delete_file(tmp_path / "missing") is False

    def test_rename(self, populated):
        assert rename_file(populated / "app.log", populated / "moved.log") is True
        assert (populated / "moved.log").read_text() == "main"

    def test_rename_missing_returns_false(self, tmp_path):
        assert rename_file(tmp_path / "missing", tmp_path / "other") is False

    def test_remove_matching(self, populated):
        removed = remove_matching(populated, "app.log.[0-9][0-9]")
        assert removed == 2
        assert not (populated / "app.log.01").exists()
        assert (populated / "app.log.001").exists()
        assert (populated / "app.log").exists()


class TestLocalFileSystem:
    def test_file_size(self, populated):
        fs = LocalFileSystem()
        assert fs.file_size(str(populated / "app.log")) == 4
        assert fs.file_size(str(populated / "archive")) is None
        assert fs.file_size(str(populated / "missing")) is None
