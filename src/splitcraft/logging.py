"""Logging helpers for SplitCraft."""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "splitcraft"
DEFAULT_LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"

_VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.INFO,
    3: logging.DEBUG,
}


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger nested under the ``splitcraft`` namespace."""
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def verbosity_to_level(verbosity: int) -> int:
    """Map a 0..3 verbosity value onto a logging level."""
    verbosity = max(0, min(3, int(verbosity)))
    return _VERBOSITY_LEVELS[verbosity]


def configure_logging(verbosity: int = 1, *, force: bool = True) -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    Args:
        verbosity: 0=warnings only, 1-2=info, 3=debug
        force: Remove previously attached handlers to avoid duplicate lines

    Returns:
        The configured package logger
    """
    level = verbosity_to_level(verbosity)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    if force:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
    logger.addHandler(handler)

    # Root handlers would print every record twice.
    logger.propagate = False
    logging.captureWarnings(True)
    return logger


__all__ = ["configure_logging", "get_logger", "verbosity_to_level", "DEFAULT_LOG_FORMAT"]
