"""Shared fixtures: an in-memory filesystem for failure injection."""

from __future__ import annotations

import fnmatch
import os

import pytest

from rotalog.filez import ListFilter


class MemoryFileSystem:
    """Dict-backed stand-in for LocalFileSystem. Keys are full paths."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.fail_renames = set()
        self.fail_deletes = set()
        self.calls = []

    def list_entries(self, directory, type_filter, mask):
        self.calls.append(("list", directory))
        names = []
        for path in self.files:
            parent, name = os.path.split(path)
            if parent != directory:
                continue
            if name.startswith(".") and not type_filter & ListFilter.HIDDEN:
                continue
            if mask and not fnmatch.fnmatchcase(name, mask):
                continue
            names.append(name)
        return names

    def file_size(self, path):
        data = self.files.get(path)
        return None if data is None else len(data)

    def delete_file(self, path):
        self.calls.append(("delete", path))
        if path in self.fail_deletes or path not in self.files:
            return False
        del self.files[path]
        return True

    def rename_file(self, src, dst):
        self.calls.append(("rename", src, dst))
        if src in self.fail_renames or src not in self.files:
            return False
        self.files[dst] = self.files.pop(src)
        return True


@pytest.fixture
def memfs():
    return MemoryFileSystem()
