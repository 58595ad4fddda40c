"""Snapshot of a log file and its numbered backups, read fresh from disk."""

from __future__ import annotations

import glob
import os
from dataclasses import dataclass, field

from rotalog.filez import ListFilter, LocalFileSystem, split_path

DEFAULT_INDEX_WIDTH = 2


def backup_mask(leaf: str, index_width: int = DEFAULT_INDEX_WIDTH) -> str:
    """Glob matching ``<leaf>.<N digits>`` and nothing longer."""
    return glob.escape(leaf) + "." + "[0-9]" * index_width


def backup_name(leaf: str, index: int, index_width: int = DEFAULT_INDEX_WIDTH) -> str:
    return f"{leaf}.{index:0{index_width}d}"


@dataclass
class RotationInventory:
    base_path: str
    directory: str
    leaf: str
    index_width: int = DEFAULT_INDEX_WIDTH
    main_exists: bool = False
    main_size: int = 0
    backup_files: list[str] = field(default_factory=list)

    def _parse(self, name: str) -> int | None:
        suffix = name[-self.index_width:]
        return int(suffix) if suffix.isdigit() else None

    @property
    def indices(self) -> list[int]:
        return [i for i in (self._parse(n) for n in self.backup_files) if i is not None]

    @property
    def lowest_index(self) -> int | None:
        return self._parse(self.backup_files[0]) if self.backup_files else None

    @property
    def highest_index(self) -> int | None:
        return self._parse(self.backup_files[-1]) if self.backup_files else None

    @property
    def is_contiguous(self) -> bool:
        if not self.backup_files:
            return False
        return self.highest_index - self.lowest_index + 1 == len(self.backup_files)

    def backup_name(self, index: int) -> str:
        return backup_name(self.leaf, index, self.index_width)

    def path_for(self, index: int) -> str:
        return os.path.join(self.directory, self.backup_name(index))


def build_inventory(
    base_path: str | os.PathLike,
    index_width: int = DEFAULT_INDEX_WIDTH,
    fs: LocalFileSystem | None = None,
) -> RotationInventory:
    """Read the current main-file size and sorted backup list for ``base_path``.

    Never raises: a missing directory gives an inventory with no main file
    and no backups. Fixed-width suffixes make the lexicographic sort a
    numeric one.
    """
    fs = fs or LocalFileSystem()
    base = os.fspath(base_path)
    directory, leaf = split_path(base)
    inventory = RotationInventory(
        base_path=base, directory=directory, leaf=leaf, index_width=index_width
    )

    size = fs.file_size(base)
    if size is not None:
        inventory.main_exists = True
        inventory.main_size = size

    type_filter = ListFilter.FILES
    if leaf.startswith("."):
        type_filter |= ListFilter.HIDDEN
    names = fs.list_entries(directory, type_filter, backup_mask(leaf, index_width))
    inventory.backup_files = sorted(n for n in names if n[-index_width:].isdigit())
    return inventory
