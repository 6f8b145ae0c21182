"""Logging setup shared by services and UI."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from core.settings import LOG_PATH, LOGGING

ROOT_LOGGER = "final_buzzer"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    path: Optional[Path] = None,
) -> logging.Logger:
    """Attach the rotating file handler to the application logger once."""

    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        target = Path(path or LOG_PATH)
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            target,
            maxBytes=LOGGING.max_bytes,
            backupCount=LOGGING.backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOGGING.fmt))
        logger.addHandler(handler)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


__all__ = ["ROOT_LOGGER", "configure_logging", "get_logger"]
