"""Levelled logging to an append-only file and a coloured console."""

from __future__ import annotations

import enum
import logging
import sys
from dataclasses import dataclass
from datetime import datetime


class LogLevel(enum.IntEnum):
    """Severity of a log message, lowest first."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3


_COLOURS = {
    LogLevel.DEBUG: "\033[36m",
    LogLevel.INFO: "\033[32m",
    LogLevel.WARN: "\033[33m",
    LogLevel.ERROR: "\033[31m",
}
_RESET = "\033[0m"
_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


@dataclass
class _Logger:
    level: LogLevel
    file_logger: logging.Logger
    handler: logging.Handler | None


_logger: _Logger | None = None


def init_logger(log_file, level):
    """Open (or create) log_file for appending and log messages at level or above."""
    global _logger
    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(filename)s:%(lineno)d: %(message)s", datefmt=_DATE_FORMAT
        )
    )
    file_logger = logging.getLogger(f"{__name__}.file")
    file_logger.propagate = False
    file_logger.setLevel(logging.DEBUG)
    for old in list(file_logger.handlers):
        file_logger.removeHandler(old)
        old.close()
    file_logger.addHandler(handler)
    _logger = _Logger(level=LogLevel(level), file_logger=file_logger, handler=handler)


def log(level, message, *args):
    """Log a printf-style message to the file and, coloured, to standard output."""
    text = message % args if args else message
    if _logger is None:
        stamp = datetime.now().strftime(_DATE_FORMAT)
        sys.stderr.write(f"{stamp} [UNINITIALIZED LOGGER] {text}\n")
        return
    level = LogLevel(level)
    if level < _logger.level:
        return
    prefix = f"[{level.name}]"
    if _logger.handler is not None:
        _logger.file_logger.info("%s %s", prefix, text, stacklevel=2)
    print(f"{_COLOURS[level]}{prefix} {text}{_RESET}")


def close_logger():
    """Close the log file; console output carries on."""
    if _logger is not None and _logger.handler is not None:
        _logger.file_logger.removeHandler(_logger.handler)
        _logger.handler.close()
        _logger.handler = None