"""Logging configuration module for jsonize.

This module provides a centralized logging setup using loguru, with configuration
support through environment variables. The logger is configured when the module
is imported and writes colored output to stderr.

Environment Variables:
    JSONIZE_LOG_LEVEL: Sets the logging level (default: WARNING).
        Valid values: TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL.

Attributes:
    logger: The configured loguru logger instance used throughout the package.

Example:
    >>> from jsonize.utils.logger import logger
    >>> logger.debug("Building schema for Point")
"""

import os
import sys

from dotenv import load_dotenv
from loguru import logger

__all__ = ["logger", "setup_logger"]


def setup_logger():
    """Configure the loguru logger with the jsonize format and level.

    This function loads environment variables from .env files, reads
    ``JSONIZE_LOG_LEVEL`` and replaces loguru's default handler with a single
    stderr handler.
    """
    load_dotenv(override=False)

    log_level = os.getenv("JSONIZE_LOG_LEVEL", "WARNING").upper()

    logger.remove()

    logger.add(
        sink=sys.stderr,
        level=log_level,
        backtrace=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        colorize=True,
    )


setup_logger()
