"""Configuration for Linkshelf.

Loaded from ``<linkshelf_home>/config.yaml``. Falls back to defaults if the
file doesn't exist or is invalid, and writes a commented default file on
first run so users can discover and edit it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .log import logger
from .platform import linkshelf_home

CONFIG_FILENAME = "config.yaml"
BACKENDS: tuple[str, ...] = ("auto", "local")
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")

_DEFAULT_YAML = """\
# Linkshelf configuration
# Delete this file to reset to defaults.

storage:
  data_dir: ""        # where local JSON blobs live (empty = ~/.linkshelf/data)
  backend: auto       # auto = use the desktop host when present, local = always files

logging:
  level: WARNING      # DEBUG, INFO, WARNING or ERROR
  file: ""            # log file path (empty = ~/.linkshelf/linkshelf.log)
"""


def _default_data_dir() -> Path:
    return linkshelf_home() / "data"


def _default_log_file() -> Path:
    return linkshelf_home() / "linkshelf.log"


@dataclass
class ShelfConfig:
    """Top-level Linkshelf configuration."""

    data_dir: Path = field(default_factory=_default_data_dir)
    backend: str = "auto"
    log_level: str = "WARNING"
    log_file: Path = field(default_factory=_default_log_file)


def load_config(path: Path | None = None) -> ShelfConfig:
    """Load configuration from YAML.

    Unknown keys are ignored; invalid values keep their defaults.
    """
    path = path or linkshelf_home() / CONFIG_FILENAME
    config = ShelfConfig()

    if not path.exists():
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_DEFAULT_YAML, encoding="utf-8")
        except OSError:
            logger.debug("could not write default config to %s", path, exc_info=True)
        return config

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError):
        logger.debug("failed to parse config %s", path, exc_info=True)
        return config
    if not isinstance(data, dict):
        return config

    storage = data.get("storage")
    if isinstance(storage, dict):
        if storage.get("data_dir"):
            config.data_dir = Path(str(storage["data_dir"])).expanduser()
        backend = str(storage.get("backend", "")).lower()
        if backend in BACKENDS:
            config.backend = backend

    logging_section = data.get("logging")
    if isinstance(logging_section, dict):
        level = str(logging_section.get("level", "")).upper()
        if level in LOG_LEVELS:
            config.log_level = level
        if logging_section.get("file"):
            config.log_file = Path(str(logging_section["file"])).expanduser()

    return config
