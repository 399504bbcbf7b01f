"""Logging configuration for facepay.

All modules log through `get_logger(__name__)`; loggers live under the
"facepay" namespace so one call to `setup_logging()` configures them all.
Credentials are never passed to a logger.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER = "facepay"

FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Level-colored formatter, used only when stderr is a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if hasattr(sys.stderr, "isatty") and sys.stderr.isatty():
            color = self.COLORS.get(record.levelname)
            if color:
                return f"{color}{message}{self.RESET}"
        return message


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configure the facepay root logger.

    Args:
        level: Log level name. If None, read from Settings (FACEPAY_LOG_LEVEL).
        log_file: Optional file path to also log to.

    Returns:
        The configured "facepay" logger.

    Example:
        >>> setup_logging("DEBUG")
        >>> get_logger(__name__).info("payment service ready")
    """
    logger = logging.getLogger(ROOT_LOGGER)

    if level is None:
        from facepay.config import Settings

        try:
            level = Settings.from_env().log_level
        except ValueError:
            level = "INFO"

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Reconfiguring replaces earlier handlers instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter(FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a facepay module.

    Handlers are attached to the "facepay" root by setup_logging(); module
    loggers just propagate to it.
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
