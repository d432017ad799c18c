"""Logging bootstrap shared by every vidupload module."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "vidupload"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stdout handler to the package logger (idempotent)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    # Avoid duplicate handlers when the app factory runs more than once
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        logger.addHandler(handler)

    logger.propagate = False  # uvicorn installs its own root handlers
    return logger
