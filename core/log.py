"""Named loggers backed by rotating files in the data directory."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from core.settings import LOGGING


def get_logger(area: str, *, level: Optional[str] = None, directory: Optional[Path] = None) -> logging.Logger:
    """Return the ``homebase.<area>`` logger, attaching a file handler once."""

    logger = logging.getLogger(f"homebase.{area}")
    if not logger.handlers:
        log_dir = Path(directory or LOGGING.directory)
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_dir / f"{area}.log",
            maxBytes=LOGGING.max_bytes,
            backupCount=LOGGING.backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOGGING.fmt))
        logger.addHandler(handler)
    logger.setLevel((level or LOGGING.level).upper())
    return logger


__all__ = ["get_logger"]
