"""
Logging configuration for the task tracker.
"""
import sys
from typing import Optional

from loguru import logger as loguru_logger

from .config import get_settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logger(level: Optional[str] = None, log_file: Optional[str] = None):
    """Replace loguru's default sink with ours; optionally add a rotating file sink."""
    cfg = get_settings()
    level = level or cfg.LOG_LEVEL
    log_file = log_file or cfg.LOG_FILE

    loguru_logger.remove()
    loguru_logger.add(sys.stderr, format=LOG_FORMAT, level=level, colorize=True)

    if log_file:
        loguru_logger.add(
            log_file,
            format=LOG_FORMAT,
            level=level,
            rotation="10 MB",
            compression="zip",
            retention="1 month",
        )

    return loguru_logger


logger = loguru_logger
