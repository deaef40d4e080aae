"""Shared logging configuration.

Usage:
    from favsync.logging_config import setup_logging
    setup_logging()  # level from LOG_LEVEL
"""

import logging
import sys
from typing import Optional

from favsync.config import get_settings

LOGGER_NAME = "favsync"


class ServiceFormatter(logging.Formatter):
    """Standard formatter with a fixed service prefix."""

    def __init__(self, service_name: str = LOGGER_NAME):
        # Format: [favsync] 2026-01-26 19:45:00 - INFO - favsync.services.sync_engine - Message
        super().__init__(
            fmt=f"[{service_name}] %(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the package logger with a single console handler.

    Safe to call more than once; existing handlers are replaced.

    Args:
        level: Log level name. Defaults to the LOG_LEVEL setting.

    Returns:
        The configured ``favsync`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, (level or get_settings().log_level).upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ServiceFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    return logger
