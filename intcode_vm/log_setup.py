"""
Intcode VM - Logging Setup

One named logger with two handlers. A file handler captures everything
when a log file is requested; a rich console handler only shows what
matters (WARNING+ by default).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .config import LOGGER_NAME, DEFAULT_LOG_LEVEL, DEFAULT_CONSOLE_LEVEL

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"


def setup_logging(
    name: str = LOGGER_NAME,
    level: int = DEFAULT_LOG_LEVEL,
    console_level: int = DEFAULT_CONSOLE_LEVEL,
    log_file: Optional[Union[str, Path]] = None,
    rich_console: bool = True,
) -> logging.Logger:
    """Configure and return the package logger.

    Safe to call more than once: a logger that already has handlers is
    returned untouched.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(level)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(fh)

    if rich_console:
        ch = RichHandler(
            level=console_level,
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
    else:
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-7s | %(message)s", datefmt="%H:%M:%S",
        ))
    ch.setLevel(console_level)
    logger.addHandler(ch)

    logger.debug("Logger initialized: %s", name)
    if log_file:
        logger.debug("Log file: %s", log_file)
    return logger


def reset_logging(name: str = LOGGER_NAME):
    """Drop every handler from the package logger (used between CLI runs)."""
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
