# skinfetch/utils/logger.py
import logging
import sys
from typing import Optional

# ANSI escape codes for colors
RESET = "\033[0m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"

LEVEL_COLORS = {
    "DEBUG": CYAN,
    "INFO": GREEN,
    "WARNING": YELLOW,
    "ERROR": RED,
    "CRITICAL": RED + MAGENTA,
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Wraps each formatted record in the color of its level."""

    def format(self, record):
        log_message = super().format(record)
        color = LEVEL_COLORS.get(record.levelname)
        if color is None:
            return log_message
        return f"{color}{log_message}{RESET}"


def setup_logger(
    name: str = "skinfetch", level: str = "INFO", log_file: Optional[str] = None
) -> logging.Logger:
    """Sets up a logger with a colored console handler and an optional log file.

    Calling it again for the same name only updates the level, so modules can
    call it freely at import time.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())

    if logger.handlers:
        return logger

    logger.propagate = False

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def configure_logging(level: str, log_file: Optional[str] = None) -> logging.Logger:
    """Apply the configured level (and file, if any) to the package logger."""
    package_logger = setup_logger("skinfetch", level)
    if log_file and not any(
        isinstance(h, logging.FileHandler) for h in package_logger.handlers
    ):
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        package_logger.addHandler(file_handler)
    return package_logger


logger = setup_logger()
