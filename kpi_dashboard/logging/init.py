from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Application logging with labeled prefixes.

Every line written to stdout carries one label (INFO|WARN|ERROR|SUMMARY) so
a refresh run can be grepped. Module loggers (``logging.getLogger(__name__)``
under ``kpi_dashboard.*``) propagate into the application logger set up here;
their DEBUG lines additionally show the emitting module.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "reset_logging",
    "set_debug",
]

APP_LOGGER_NAME = "kpi_dashboard"

# Custom SUMMARY level (between INFO=20 and WARNING=30)
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """``LABEL message``; DEBUG lines become ``DEBUG [module] message``."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        message = record.getMessage()
        if record.levelno == logging.DEBUG and record.name != APP_LOGGER_NAME:
            message = f"[{record.name}] {message}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"{label} {message}"


def setup_logging(stream: TextIO | None = None) -> logging.Logger:
    """Configure the application logger once; later calls return the same logger.

    Args:
        stream: output stream, stdout by default (CLI contract)
    """
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    # root へは流さない (二重出力防止)
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    """Log ``message`` at SUMMARY level (the formatter adds the ``SUMMARY`` label)."""
    get_logger().log(SUMMARY_LEVEL, message)


def set_debug(logger: logging.Logger) -> None:
    """Lower the application logger and its handlers to DEBUG."""
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)
    logger.setLevel(logging.DEBUG)


def reset_logging() -> None:
    """Forget the configured logger. Mainly for tests."""
    global _logger
    _logger = None
