"""Logging setup shared by the app factory and scripts."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach one stdout handler to the package logger and set its level."""
    logger = logging.getLogger("bdinvest")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    if not any(getattr(h, "_bdinvest", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._bdinvest = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
