"""Package-wide logger.

Modules import ``logger`` from here instead of calling ``getLogger`` each.
Nothing is emitted until :func:`configure_logging` attaches a handler.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

logger = logging.getLogger("linkshelf")
logger.addHandler(logging.NullHandler())

_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_MAX_BYTES = 512 * 1024
_BACKUP_COUNT = 2


def configure_logging(level: str = "WARNING", path: Path | None = None) -> None:
    """Set the package log level and write records to *path* (rotating).

    Without *path*, records go to stderr. Calling again replaces the
    previously attached handler.
    """
    for existing in list(logger.handlers):
        if not isinstance(existing, logging.NullHandler):
            logger.removeHandler(existing)
            existing.close()

    handler: logging.Handler
    if path is not None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
            )
        except OSError:
            handler = logging.StreamHandler()
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
