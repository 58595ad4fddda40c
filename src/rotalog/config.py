"""Config loading, defaults, validation, and deep merge."""

from __future__ import annotations

import logging
from pathlib import Path

from rotalog.rotation import RotationConfig
from rotalog.sink import DEFAULT_DATEFMT, DEFAULT_FORMAT, LogType, RotationStrategy
from rotalog.utils import deep_merge, load_json, load_yaml, parse_size, save_json

logger = logging.getLogger(__name__)

CONFIG_DIR = ".rotalog"
CONFIG_NAME = "config.json"

SEVERITIES = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

DEFAULT_CONFIG: dict = {
    "version": 1,
    "log_file": "rotalog.log",
    "severity": "debug",
    "log_type": "all",
    "format": DEFAULT_FORMAT,
    "datefmt": DEFAULT_DATEFMT,
    "append": True,
    "retention_count": 0,
    "size_threshold": 0,
    "index_width": 2,
}


def get_config_path(start_dir: Path | None = None) -> Path:
    """Find .rotalog/config.json by walking up from start_dir."""
    search = start_dir or Path.cwd()
    for d in [search, *search.parents]:
        candidate = d / CONFIG_DIR / CONFIG_NAME
        if candidate.exists():
            return candidate
    return (start_dir or Path.cwd()) / CONFIG_DIR / CONFIG_NAME


def _read_config_file(path: Path) -> dict:
    if path.suffix in (".yaml", ".yml"):
        return load_yaml(path)
    return load_json(path)


def load_config(location: Path | None = None) -> dict:
    """Load config merged with defaults.

    ``location`` may be a config file (.json/.yaml/.yml) or a directory to
    search upward from for .rotalog/config.json.
    """
    if location is not None and location.is_file():
        config_path = location
    else:
        config_path = get_config_path(location)
    if config_path.exists():
        user_config = _read_config_file(config_path)
        if not user_config:
            logger.warning(
                "Config file exists but could not be loaded (corrupt?): %s "
                "Using defaults.", config_path
            )
        return deep_merge(DEFAULT_CONFIG, user_config)
    return DEFAULT_CONFIG.copy()


def save_config(config: dict, target_dir: Path | None = None) -> Path:
    """Save config to .rotalog/config.json."""
    target = target_dir or Path.cwd()
    config_path = target / CONFIG_DIR / CONFIG_NAME
    save_json(config_path, config)
    return config_path


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def validate_config(config: dict) -> list[str]:
    """Validate config, returning list of error messages (empty if valid)."""
    errors = []
    if not config.get("log_file"):
        errors.append("Missing 'log_file'")
    if config.get("severity") not in SEVERITIES:
        errors.append(f"Invalid severity '{config.get('severity')}'")
    if config.get("log_type") not in {t.value for t in LogType}:
        errors.append(f"Invalid log_type '{config.get('log_type')}'")
    if not isinstance(config.get("append"), bool):
        errors.append("'append' must be true or false")
    for key in ("retention_count", "index_width"):
        if not _is_count(config.get(key)):
            errors.append(f"'{key}' must be a non-negative integer")
    try:
        parse_size(config.get("size_threshold"))
    except ValueError as exc:
        errors.append(f"'size_threshold': {exc}")
    if errors:
        return errors

    if config["index_width"] < 1:
        errors.append("'index_width' must be at least 1")
    elif config["retention_count"] >= 10 ** config["index_width"]:
        errors.append(
            f"'retention_count' {config['retention_count']} does not fit in "
            f"{config['index_width']}-digit backup indices"
        )
    return errors


def rotation_config_from(config: dict) -> RotationConfig:
    return RotationConfig(
        base_path=config["log_file"],
        append=config["append"],
        retention_count=config["retention_count"],
        size_threshold=parse_size(config["size_threshold"]),
        index_width=config["index_width"],
    )


def strategy_from_config(config: dict) -> RotationStrategy:
    return RotationStrategy(
        severity=SEVERITIES[config["severity"]],
        log_type=LogType(config["log_type"]),
        filename=config["log_file"],
        fmt=config["format"],
        datefmt=config["datefmt"],
        append=config["append"],
        retention_count=config["retention_count"],
        size_threshold=parse_size(config["size_threshold"]),
        index_width=config["index_width"],
    )
