"""Size-based log rotation into numbered backups (``app.log.01``, ``app.log.02``, ...)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from rotalog.filez import LocalFileSystem
from rotalog.inventory import DEFAULT_INDEX_WIDTH, RotationInventory, build_inventory

logger = logging.getLogger(__name__)


class RotationError(Exception):
    """Raised by RotationResult.raise_for_failures() when a rename or delete failed."""

    def __init__(self, failures: list[tuple[str, str]]) -> None:
        self.failures = failures
        detail = ", ".join(f"{op} {path}" for op, path in failures)
        super().__init__(f"Rotation incomplete: {detail}")


@dataclass(frozen=True)
class RotationConfig:
    """Rotation settings for one log file.

    ``retention_count`` of 0 disables rotation. ``size_threshold`` of 0
    rotates whenever the main file exists.
    """

    base_path: str
    append: bool = True
    retention_count: int = 0
    size_threshold: int = 0
    index_width: int = DEFAULT_INDEX_WIDTH

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_path", os.fspath(self.base_path))
        if self.index_width < 1:
            raise ValueError(f"index_width must be at least 1, got {self.index_width}")
        if self.retention_count < 0:
            raise ValueError(f"retention_count must be non-negative, got {self.retention_count}")
        if self.size_threshold < 0:
            raise ValueError(f"size_threshold must be non-negative, got {self.size_threshold}")
        if self.retention_count >= self.max_index + 1:
            raise ValueError(
                f"retention_count {self.retention_count} does not fit in "
                f"{self.index_width}-digit backup indices"
            )

    @property
    def enabled(self) -> bool:
        return self.retention_count > 0

    @property
    def max_index(self) -> int:
        return 10 ** self.index_width - 1


@dataclass
class RotationResult:
    rotated: bool = False
    renamed: list[tuple[str, str]] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failures: list[tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        if self.failures:
            raise RotationError(self.failures)


def should_rotate(config: RotationConfig, inventory: RotationInventory) -> bool:
    """True when rotation is enabled, the main file exists and has reached the threshold."""
    if not config.enabled or not inventory.main_exists:
        return False
    if config.size_threshold > 0 and inventory.main_size < config.size_threshold:
        return False
    return True


def contiguous_run_end(indices: list[int]) -> int:
    """Highest index N such that 1..N are all present; 0 if index 1 is missing."""
    present = set(indices)
    top = 0
    while top + 1 in present:
        top += 1
    return top


def _rename(fs: LocalFileSystem, src: str, dst: str, result: RotationResult) -> bool:
    if fs.rename_file(src, dst):
        result.renamed.append((src, dst))
        return True
    logger.warning("Could not rename %s to %s", src, dst)
    result.failures.append(("rename", src))
    return False


def _delete(fs: LocalFileSystem, path: str, result: RotationResult) -> bool:
    if fs.delete_file(path):
        result.deleted.append(path)
        return True
    logger.warning("Could not delete %s", path)
    result.failures.append(("delete", path))
    return False


def _shift_backups(
    config: RotationConfig,
    inventory: RotationInventory,
    fs: LocalFileSystem,
    result: RotationResult,
) -> bool:
    """Move backups 1..N up by one, oldest first, so index 1 is free.

    N is the end of the run starting at 1; anything past a gap stays where
    it is. Returns False if index 1 could not be freed.
    """
    top = contiguous_run_end(inventory.indices)
    if top == 0:
        return True

    if top >= config.max_index:
        # No room above the last representable index.
        if not _delete(fs, inventory.path_for(config.max_index), result):
            return False
        top = config.max_index - 1

    for index in range(top, 0, -1):
        if not _rename(fs, inventory.path_for(index), inventory.path_for(index + 1), result):
            return False
    return True


def prune_backups(
    config: RotationConfig,
    fs: LocalFileSystem | None = None,
    result: RotationResult | None = None,
) -> RotationResult:
    """Delete the highest-indexed backups until at most ``retention_count`` remain.

    A failed delete still drops the entry from the working list, so the
    loop always terminates.
    """
    fs = fs or LocalFileSystem()
    result = result if result is not None else RotationResult()
    inventory = build_inventory(config.base_path, config.index_width, fs)
    remaining = list(inventory.backup_files)
    while len(remaining) > config.retention_count:
        name = remaining.pop()
        _delete(fs, os.path.join(inventory.directory, name), result)
    return result


def maybe_rotate(config: RotationConfig, fs: LocalFileSystem | None = None) -> RotationResult:
    """Rotate ``config.base_path`` if it is due, then enforce the retention cap.

    Never raises for filesystem problems: each failed rename or delete is
    logged, recorded in the result, and skipped. If index 1 cannot be
    freed the main file is left in place; the retention cap is enforced
    either way.
    """
    result = RotationResult()
    if not config.enabled:
        return result

    fs = fs or LocalFileSystem()
    inventory = build_inventory(config.base_path, config.index_width, fs)
    if not should_rotate(config, inventory):
        logger.debug(
            "No rotation for %s (exists=%s, size=%d, threshold=%d)",
            config.base_path, inventory.main_exists, inventory.main_size, config.size_threshold,
        )
        return result

    if not _shift_backups(config, inventory, fs, result):
        logger.warning("Index 1 for %s still occupied; main file kept in place", config.base_path)
    elif _rename(fs, config.base_path, inventory.path_for(1), result):
        result.rotated = True
        logger.info("Rotated %s (%d bytes)", config.base_path, inventory.main_size)

    prune_backups(config, fs, result)
    return result
