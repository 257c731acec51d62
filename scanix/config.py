"""Settings loaded from defaults, an optional YAML file and the environment.

Environment variables (take precedence over the YAML file):
    SCANIX_DATABASE: Path to the SQLite database
    SCANIX_EXPORT_DIR: Directory for exported PDFs
    SCANIX_PHOTOS_DIR: Directory used as the photo library
    SCANIX_JPEG_QUALITY: JPEG quality for stored pages (1-100)
    SCANIX_THUMBNAIL_SIZE: Longest side of list thumbnails, in pixels
    SCANIX_LOG_LEVEL: Logging level name (e.g. DEBUG, INFO)
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .core.images import DEFAULT_JPEG_QUALITY, DEFAULT_THUMBNAIL_SIZE


class ConfigError(Exception):
    """Raised when the configuration file or environment is invalid."""
    pass


ENV_VARS = {
    "database_path": "SCANIX_DATABASE",
    "export_dir": "SCANIX_EXPORT_DIR",
    "photos_dir": "SCANIX_PHOTOS_DIR",
    "jpeg_quality": "SCANIX_JPEG_QUALITY",
    "thumbnail_size": "SCANIX_THUMBNAIL_SIZE",
    "log_level": "SCANIX_LOG_LEVEL",
}


@dataclass
class Settings:
    database_path: Path = Path("data/scans.db")
    export_dir: Path = Path("data/exports")
    photos_dir: Path = Path("data/photos")
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    thumbnail_size: int = DEFAULT_THUMBNAIL_SIZE
    log_level: str = "INFO"


def _coerce(name: str, value) -> object:
    """Convert a raw YAML/env value to the type of the named setting."""
    if name in ("database_path", "export_dir", "photos_dir"):
        return Path(value)
    if name in ("jpeg_quality", "thumbnail_size"):
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"'{name}' must be an integer, got {value!r}")
        if name == "jpeg_quality" and not 1 <= number <= 100:
            raise ConfigError(f"'jpeg_quality' must be between 1 and 100, got {number}")
        if number <= 0:
            raise ConfigError(f"'{name}' must be positive, got {number}")
        return number
    level = str(value).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Unknown log level: {value!r}")
    return level


def load_yaml_config(config_path: str | Path) -> dict:
    """Load a YAML configuration mapping."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with open(path) as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")
    return config


def load_settings(config_path: Optional[str | Path] = None) -> Settings:
    """Build settings from defaults, then the YAML file, then the environment."""
    known = {f.name for f in fields(Settings)}
    values: dict = {}

    if config_path is not None:
        config = load_yaml_config(config_path)
        unknown = sorted(set(config) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        for name, raw in config.items():
            values[name] = _coerce(name, raw)

    for name, env_var in ENV_VARS.items():
        raw = os.environ.get(env_var)
        if raw:
            values[name] = _coerce(name, raw)

    return Settings(**values)
