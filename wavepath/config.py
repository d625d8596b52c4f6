"""config.py
YAML configuration for wavepath, stored in ~/.wavepath/config.yaml.

Set WAVEPATH_HOME (environment or a .env file) to use another directory.
Values found on disk are merged over DEFAULT_CONFIG, so a partial file is
fine.
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)
load_dotenv()

__all__ = [
    "CONFIG_DIR",
    "DEFAULT_CONFIG",
    "load_config",
    "save_config",
    "get_log_file_path",
    "config_file_path",
]

CONFIG_DIR = Path(os.getenv("WAVEPATH_HOME", str(Path.home() / ".wavepath"))).expanduser()

DEFAULT_CONFIG: dict[str, Any] = {
    "render": {
        "profile": "classic",
        "window_size": 100,
        "flush_partial": False,
        "read_size": 8192,
    },
    "output": {
        "path": "output.svg",
        "optimize": False,
        "optimizer": "svgo",
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
}


def config_file_path(config_dir: Optional[Path] = None) -> Path:
    return (config_dir or CONFIG_DIR) / "config.yaml"


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Path] = None) -> dict:
    """Return the effective configuration (defaults + file)."""
    path = path or config_file_path()
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return copy.deepcopy(DEFAULT_CONFIG)

    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    logger.debug("Loaded config from %s", path)
    return _merge(DEFAULT_CONFIG, data)


def save_config(config: dict, path: Optional[Path] = None) -> Path:
    path = path or config_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(config, fh, default_flow_style=False, sort_keys=False)
    return path


def get_log_file_path(config: dict) -> Optional[str]:
    return config.get("logging", {}).get("file")
