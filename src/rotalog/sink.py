"""File sink strategies and the logging handler that rotates before it opens."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import TextIO

from rotalog.filez import LocalFileSystem
from rotalog.inventory import DEFAULT_INDEX_WIDTH
from rotalog.rotation import RotationConfig, RotationResult, maybe_rotate

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "%(asctime)s.%(msecs)03d %(filename)s(%(lineno)d) [%(levelname)s]: %(message)s"
DEFAULT_DATEFMT = "%Y%m%d %H:%M:%S"


class LogType(str, Enum):
    NORMAL = "normal"
    SPECIAL = "special"
    ALL = "all"


class LogTypeFilter(logging.Filter):
    """Pass records whose ``log_type`` extra matches; records without one are normal."""

    def __init__(self, log_type: LogType = LogType.ALL) -> None:
        super().__init__()
        self.log_type = LogType(log_type)

    def filter(self, record: logging.LogRecord) -> bool:
        if self.log_type is LogType.ALL:
            return True
        record_type = getattr(record, "log_type", LogType.NORMAL)
        return LogType(record_type) is self.log_type


class FileStrategy:
    """How a file sink filters, formats and opens its file."""

    def __init__(
        self,
        severity: int = logging.DEBUG,
        log_type: LogType = LogType.ALL,
        filename: str | os.PathLike = "app.log",
        fmt: str = DEFAULT_FORMAT,
        datefmt: str = DEFAULT_DATEFMT,
        encoding: str = "utf-8",
    ) -> None:
        self.severity = severity
        self.log_type = LogType(log_type)
        self.filename = os.fspath(filename)
        self.fmt = fmt
        self.datefmt = datefmt
        self.encoding = encoding

    @property
    def mode(self) -> str:
        return "a"

    def open(self) -> TextIO:
        return open(self.filename, self.mode, encoding=self.encoding)


class RotationStrategy(FileStrategy):
    """File strategy that rotates the file by size every time it is opened."""

    def __init__(
        self,
        severity: int = logging.DEBUG,
        log_type: LogType = LogType.ALL,
        filename: str | os.PathLike = "app.log",
        fmt: str = DEFAULT_FORMAT,
        datefmt: str = DEFAULT_DATEFMT,
        append: bool = True,
        retention_count: int = 0,
        size_threshold: int = 0,
        index_width: int = DEFAULT_INDEX_WIDTH,
        encoding: str = "utf-8",
        fs: LocalFileSystem | None = None,
    ) -> None:
        super().__init__(severity, log_type, filename, fmt, datefmt, encoding)
        self.rotation = RotationConfig(
            base_path=self.filename,
            append=append,
            retention_count=retention_count,
            size_threshold=size_threshold,
            index_width=index_width,
        )
        self.fs = fs
        self.last_result: RotationResult | None = None

    @property
    def mode(self) -> str:
        return "a" if self.rotation.append else "w"

    def prepare_for_write(self) -> RotationResult:
        """Run the rotation check to completion; called right before the file opens."""
        self.last_result = maybe_rotate(self.rotation, self.fs)
        return self.last_result

    def open(self) -> TextIO:
        self.prepare_for_write()
        return super().open()


class StrategyFileHandler(logging.FileHandler):
    """logging.FileHandler whose file is opened through a FileStrategy."""

    def __init__(self, strategy: FileStrategy, delay: bool = False) -> None:
        self.strategy = strategy
        super().__init__(strategy.filename, mode=strategy.mode, encoding=strategy.encoding, delay=delay)
        self.setLevel(strategy.severity)
        self.setFormatter(logging.Formatter(strategy.fmt, datefmt=strategy.datefmt))
        self.addFilter(LogTypeFilter(strategy.log_type))

    def _open(self) -> TextIO:
        return self.strategy.open()

    def reopen(self) -> None:
        """Close the stream; the next record reopens it (and re-checks rotation)."""
        self.acquire()
        try:
            if self.stream:
                try:
                    self.flush()
                finally:
                    stream = self.stream
                    self.stream = None
                    stream.close()
        finally:
            self.release()


def attach_rotating_sink(
    target: logging.Logger | str | None,
    strategy: FileStrategy,
    delay: bool = False,
) -> StrategyFileHandler:
    """Add a StrategyFileHandler for ``strategy`` to ``target`` (a logger or logger name)."""
    log = target if isinstance(target, logging.Logger) else logging.getLogger(target)
    handler = StrategyFileHandler(strategy, delay=delay)
    log.addHandler(handler)
    if log.level == logging.NOTSET or log.level > strategy.severity:
        log.setLevel(strategy.severity)
    logger.debug("Attached file sink %s to logger %r", strategy.filename, log.name)
    return handler
