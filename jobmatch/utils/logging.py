"""Logging configuration for jobmatch.

Module loggers (``logging.getLogger(__name__)``) inside the package are
children of the ``jobmatch`` logger, so one console handler serves them all.
Output goes to stderr; stdout is reserved for CLI results.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOGGER_NAME = "jobmatch"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "jobmatch-console"


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        from jobmatch.config.settings import get_settings

        level = get_settings().log_level
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _console_handler(logger: logging.Logger) -> logging.StreamHandler | None:
    for handler in logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            return handler
    return None


def configure_logging(
    level: str | int | None = None,
    *,
    stream: TextIO | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
) -> logging.Logger:
    """Configure and return the ``jobmatch`` logger.

    Calling it again only updates the level, unless a different ``stream``
    is passed, in which case the console handler is replaced.

    Args:
        level: Level name or number. Defaults to ``Settings.log_level``.
        stream: Destination for log records (defaults to stderr).
        format_string: Format string for log messages.
        date_format: Format string for timestamps.
    """
    log_level = _resolve_level(level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False

    handler = _console_handler(logger)
    if handler is not None and stream is not None and handler.stream is not stream:
        logger.removeHandler(handler)
        handler = None

    if handler is None:
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(format_string, datefmt=date_format))
        logger.addHandler(handler)

    handler.setLevel(log_level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``jobmatch`` namespace.

    Names already inside the package are returned unchanged, anything else is
    prefixed (``"cli"`` -> ``"jobmatch.cli"``).
    """
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Reset logging configuration (useful for testing)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
