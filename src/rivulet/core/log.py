# log.py
# SPDX-License-Identifier: MIT
"""Package logger helpers.

Importing :mod:`rivulet` never configures logging on its own: the package
logger only gets a NullHandler. Applications that want to see stream
diagnostics call :func:`configure_logging` or attach their own handlers.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager

__all__ = [
    "PACKAGE_LOGGER_NAME",
    "get_logger",
    "configure_logging",
    "temp_level",
]

PACKAGE_LOGGER_NAME = "rivulet"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def _resolve_level(level: int | str) -> int:
    """Translate a level name into its numeric value."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown logging level: {level!r}")
    return resolved


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger scoped to rivulet.

    Args:
        name (str | None): Fully qualified logger name. Defaults to the
            package logger when omitted.

    Returns:
        logging.Logger: Logger instance for the requested name.
    """
    return logging.getLogger(name or PACKAGE_LOGGER_NAME)


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream=None,
    fmt: str | None = None,
    datefmt: str | None = None,
    propagate: bool | None = None,
    logger_name: str = PACKAGE_LOGGER_NAME,
) -> logging.Logger:
    """Attach a single stream handler to a rivulet logger.

    Calling this repeatedly does not stack handlers. The existing stream
    handler is reused: the latest call sets its stream and formatter.

    Args:
        level (int | str): Logging level or level name.
        stream (IO[str] | None): Target stream; defaults to sys.stderr.
        fmt (str | None): Log format string.
        datefmt (str | None): Date format string for the handler.
        propagate (bool | None): Whether records bubble up to ancestor
            loggers. None keeps propagation on so root handlers (e.g.
            pytest's caplog) still see records.
        logger_name (str): Logger to configure.

    Returns:
        logging.Logger: The configured logger.

    Raises:
        ValueError: If ``level`` is an unknown level name.
    """
    logger = get_logger(logger_name or PACKAGE_LOGGER_NAME)
    logger.setLevel(_resolve_level(level))
    logger.propagate = True if propagate is None else bool(propagate)

    if stream is None:
        stream = sys.stderr
    if fmt is None:
        fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)
    has_stream = False
    for handler in logger.handlers:
        if not isinstance(handler, logging.StreamHandler) or isinstance(handler, logging.FileHandler):
            continue
        has_stream = True
        if handler.stream is not stream:
            # setStream flushes the old stream, which may already be closed.
            if getattr(handler.stream, "closed", False):
                handler.stream = stream
            else:
                handler.setStream(stream)
        handler.setFormatter(formatter)
    if not has_stream:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


@contextmanager
def temp_level(level: int | str, name: str | None = None):
    """Temporarily set a logger level inside a ``with`` block.

    Yields:
        logging.Logger: Logger with the temporary level applied.
    """
    logger = get_logger(name or PACKAGE_LOGGER_NAME)
    old = logger.level
    logger.setLevel(_resolve_level(level))
    try:
        yield logger
    finally:
        logger.setLevel(old)
