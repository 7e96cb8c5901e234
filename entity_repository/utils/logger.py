"""
Logger utility for consistent logging across the package.

Features:
- Consistent log format across all modules
- Configurable log level based on environment variables
- Stream handler to stdout for easy viewing in console/terminal
- Prevents duplicate log handlers when called multiple times
"""

import os
import logging
import sys
from typing import Optional

# Default log format
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _env_level() -> int:
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, log_level_name, logging.INFO)


def setup_logging(level: Optional[int] = None) -> logging.Logger:
    """
    Configure global logging.

    Args:
        level: Root log level. Defaults to LOG_LEVEL from the environment,
            or DEBUG when DEBUG=true.

    Returns:
        logging.Logger: The package logger
    """
    debug_mode = os.getenv("DEBUG", "False").lower() == "true"
    if level is None:
        level = logging.DEBUG if debug_mode else _env_level()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates when reloading
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    # SQL echo only when debugging
    logging.getLogger('sqlalchemy.engine').setLevel(
        logging.INFO if debug_mode else logging.WARNING
    )

    logger = logging.getLogger('entity_repository')
    logger.debug(f"Logging initialized with level {logging.getLevelName(level)}")
    return logger


def get_logger(name: Optional[str] = None, level: Optional[int] = None) -> logging.Logger:
    """
    Get a logger with consistent formatting.

    If neither the logger nor the root logger has handlers, a stdout handler
    is attached so messages are not lost.

    Args:
        name: Logger name, usually ``__name__``
        level: Log level. If None, uses LOG_LEVEL from the environment.

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name or __name__)
    logger.setLevel(level if level is not None else _env_level())

    root_logger = logging.getLogger()
    if not logger.handlers and not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
        logger.addHandler(handler)

    return logger
