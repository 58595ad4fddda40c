"""rotalog - size-based log file rotation with numbered backups."""

__version__ = "0.1.0"

from rotalog.rotation import RotationConfig, RotationError, RotationResult, maybe_rotate, prune_backups
from rotalog.sink import FileStrategy, RotationStrategy, StrategyFileHandler, attach_rotating_sink

__all__ = [
    "FileStrategy",
    "RotationConfig",
    "RotationError",
    "RotationResult",
    "RotationStrategy",
    "StrategyFileHandler",
    "__version__",
    "attach_rotating_sink",
    "maybe_rotate",
    "prune_backups",
]
