"""
Logging utilities for consistent logging across the carbon engine.
"""

import logging
import sys
from typing import Optional
from src.config import Config

# Every engine logger lives under this namespace so scripts can tune them at once
ROOT_LOGGER_NAME = "src"


def _resolve_level(level: Optional[str]) -> int:
    return getattr(logging, (level or Config.LOG_LEVEL).upper(), logging.INFO)


def setup_logger(
    name: str,
    level: Optional[str] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up a logger writing to stdout with the configured format.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (defaults to Config.LOG_LEVEL)
        format_string: Custom format string (defaults to Config.LOG_FORMAT)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    resolved = _resolve_level(level)
    logger.setLevel(resolved)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(format_string or Config.LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance, configuring it on first use."""
    logger = logging.getLogger(name)

    if not logger.handlers:
        return setup_logger(name)

    return logger


def set_level(level: str) -> None:
    """
    Change the level of every already-configured engine logger.

    Used by the command-line scripts to honour a ``--log-level`` flag after
    the modules (and their loggers) have been imported.
    """
    resolved = _resolve_level(level)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if not isinstance(logger, logging.Logger):
            continue
        if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
            logger.setLevel(resolved)
            for handler in logger.handlers:
                handler.setLevel(resolved)
