"""Filesystem queries used by rotation: listing, stat, path splitting, rename/delete.

Every function here is best-effort. Failures to open a directory, stat a
path, rename or delete are reported as empty results or ``False``, never
as exceptions; a missing log directory is not an error condition.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import stat
from enum import Enum, IntFlag

from rotalog.utils import normalize_path

logger = logging.getLogger(__name__)


class ListFilter(IntFlag):
    FILES = 0x01
    DIRS = 0x02
    HIDDEN = 0x04
    NORMAL = FILES | DIRS
    ALL = FILES | DIRS | HIDDEN


class FileType(str, Enum):
    NONE = "none"
    REGULAR = "regular"
    DIRECTORY = "directory"
    CHAR_DEVICE = "char_device"
    BLOCK_DEVICE = "block_device"
    FIFO = "fifo"
    LINK = "link"
    SOCKET = "socket"


def list_entries(
    directory: str | os.PathLike,
    type_filter: ListFilter = ListFilter.NORMAL,
    mask: str = "",
) -> list[str]:
    """Return names of the immediate entries of ``directory``.

    ``type_filter`` selects regular files, directories and/or dot-prefixed
    entries. ``mask`` is a case-sensitive glob; an empty mask matches all.
    Order is whatever the OS returns. An unreadable or missing directory
    yields an empty list.
    """
    names: list[str] = []
    try:
        with os.scandir(directory) as it:
            for entry in it:
                if entry.name.startswith(".") and not type_filter & ListFilter.HIDDEN:
                    continue
                if mask and not fnmatch.fnmatchcase(entry.name, mask):
                    continue
                try:
                    is_dir = entry.is_dir()
                    is_file = entry.is_file()
                except OSError:
                    continue
                if is_dir and type_filter & ListFilter.DIRS:
                    names.append(entry.name)
                elif is_file and type_filter & ListFilter.FILES:
                    names.append(entry.name)
    except OSError as exc:
        logger.debug("Cannot list %s: %s", directory, exc)
        return []
    return names


def path_exists(path: str | os.PathLike) -> tuple[bool, os.stat_result | None]:
    """Return ``(exists, stat_result)``; ``(False, None)`` if stat fails."""
    try:
        return True, os.stat(path)
    except (OSError, ValueError):
        return False, None


def is_regular_file(path: str | os.PathLike) -> bool:
    exists, st = path_exists(path)
    return exists and stat.S_ISREG(st.st_mode)


def is_directory(path: str | os.PathLike) -> bool:
    exists, st = path_exists(path)
    return exists and stat.S_ISDIR(st.st_mode)


def file_type(path: str | os.PathLike, follow_symlinks: bool = True) -> FileType:
    """Classify ``path``. Links are only reported with ``follow_symlinks=False``."""
    try:
        mode = os.stat(path, follow_symlinks=follow_symlinks).st_mode
    except (OSError, ValueError):
        return FileType.NONE
    if stat.S_ISREG(mode):
        return FileType.REGULAR
    if stat.S_ISDIR(mode):
        return FileType.DIRECTORY
    if stat.S_ISCHR(mode):
        return FileType.CHAR_DEVICE
    if stat.S_ISBLK(mode):
        return FileType.BLOCK_DEVICE
    if stat.S_ISFIFO(mode):
        return FileType.FIFO
    if stat.S_ISLNK(mode):
        return FileType.LINK
    if stat.S_ISSOCK(mode):
        return FileType.SOCKET
    return FileType.NONE


def split_path(path: str | os.PathLike) -> tuple[str, str]:
    """Split ``path`` into ``(parent_dir, leaf_name)`` without touching the disk.

    Trailing separators are ignored. A bare name has parent ``"."``; a
    path made only of separators is the root, returned as both parts.
    Backslashes are separators only where the OS treats them as such.
    """
    text = os.fspath(path)
    if "\\" in (os.sep, os.altsep):
        text = normalize_path(text)
    if not text:
        return ".", "."
    stripped = text.rstrip("/")
    if not stripped:
        return "/", "/"
    head, sep, leaf = stripped.rpartition("/")
    if not sep:
        return ".", leaf
    return head.rstrip("/") or "/", leaf


def delete_file(path: str | os.PathLike) -> bool:
    try:
        os.remove(path)
    except OSError as exc:
        logger.debug("Delete failed for %s: %s", path, exc)
        return False
    return True


def rename_file(src: str | os.PathLike, dst: str | os.PathLike) -> bool:
    try:
        os.rename(src, dst)
    except OSError as exc:
        logger.debug("Rename failed %s -> %s: %s", src, dst, exc)
        return False
    return True


def remove_matching(directory: str | os.PathLike, mask: str) -> int:
    """Delete regular files in ``directory`` matching ``mask``. Returns count removed."""
    removed = 0
    for name in list_entries(directory, ListFilter.FILES | ListFilter.HIDDEN, mask):
        if delete_file(os.path.join(directory, name)):
            removed += 1
    return removed


class LocalFileSystem:
    """The operations the rotation engine needs, backed by the real disk."""

    def list_entries(self, directory: str, type_filter: ListFilter, mask: str) -> list[str]:
        return list_entries(directory, type_filter, mask)

    def file_size(self, path: str) -> int | None:
        """Size of a regular file, or None if it is missing or not a regular file."""
        exists, st = path_exists(path)
        if not exists or not stat.S_ISREG(st.st_mode):
            return None
        return st.st_size

    def delete_file(self, path: str) -> bool:
        return delete_file(path)

    def rename_file(self, src: str, dst: str) -> bool:
        return rename_file(src, dst)
