from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

from ..core.constants import LOG_LEVEL_DEFAULT

__all__ = ["InterceptHandler", "setup_logging", "get_logger"]


class InterceptHandler(logging.Handler):
    """Redirect stdlib logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        _logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(
    *,
    level: str = LOG_LEVEL_DEFAULT,
    console: bool = True,
    file_path: Optional[str | Path] = None,
    rotation: Optional[str | int] = None,
    retention: Optional[str | int] = None,
    serialize: bool = False,
) -> None:
    """Configure loguru sinks for operational logs.

    - Adds a console sink (stderr) and an optional file sink
    - Bridges stdlib logging to loguru
    - Never touches recorded trajectories or experiences
    """
    _logger.remove()
    lvl = level.upper()
    if console:
        _logger.add(
            sys.stderr, level=lvl, backtrace=False, diagnose=False, serialize=serialize
        )
    if file_path:
        _logger.add(
            str(file_path),
            level=lvl,
            rotation=rotation,
            retention=retention,
            backtrace=False,
            diagnose=False,
            serialize=serialize,
        )
    _bridge_stdlib(level=lvl)


def _bridge_stdlib(level: str = LOG_LEVEL_DEFAULT) -> None:
    """Route stdlib logging into loguru."""
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(getattr(logging, level, logging.INFO))
    for name in list(logging.Logger.manager.loggerDict.keys()):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True


def get_logger():
    """Return the loguru logger instance."""
    return _logger
