"""
================================================================================
Cross-Browser Tools Common Utilities
================================================================================

This module provides shared logging setup and filesystem helpers for the
cross-browser framework and its runner.

Exports:
    - init_logger: Function to initialize loguru logger with standard settings
    - ensure_directory: Create a directory if missing and return its path

Usage:
    from crossbrowser_tools.common import init_logger

    init_logger(config=ConfigLoader.instance())

================================================================================
"""

import os
import sys
from typing import Any, Optional

from loguru import logger


# ============================================================
# Logging Setup
# ============================================================

DEFAULT_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_logger_initialized = False


def init_logger(
    level: str = None,
    format_string: str = None,
    log_file: str = None,
    config: Optional[Any] = None,
    force: bool = False,
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to.
        config: Object with ``get(key, default)`` (a ConfigLoader); supplies
                logging.level / logging.file / logging.rotation / logging.retention.
        force: Reconfigure even if already initialized.

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/crossbrowser.log")
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    def setting(key: str, default: Any = None) -> Any:
        return config.get(key, default) if config is not None else default

    # Remove default handler
    logger.remove()

    level = (level or setting("logging.level", "INFO")).upper()
    format_string = format_string or setting("logging.format", DEFAULT_LOG_FORMAT)

    # Add console handler
    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    # Add file handler if specified
    log_file = log_file or setting("logging.file")
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            ensure_directory(log_dir)

        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=setting("logging.rotation", "10 MB"),
            retention=setting("logging.retention", "7 days"),
        )

    _logger_initialized = True
    logger.debug("Logger initialized successfully")


# ============================================================
# Common Utilities
# ============================================================

def ensure_directory(path: str) -> str:
    """
    Ensures a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The path (for chaining)
    """
    os.makedirs(path, exist_ok=True)
    return path


# Export public API
__all__ = [
    "init_logger",
    "ensure_directory",
    "DEFAULT_LOG_FORMAT",
]
