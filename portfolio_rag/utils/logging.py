"""
Logging configuration for the RAG system.

Provides structured logging with proper formatting and levels.
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "portfolio_rag"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    name: str = PACKAGE_LOGGER,
    level: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging configuration for a logger tree.

    Module loggers created with ``get_logger(__name__)`` inside the package
    inherit the handlers installed here on the package logger.

    Args:
        name: Logger name, the package logger by default
        level: Logging level override
        log_file: Optional log file path

    Returns:
        Configured logger instance
    """
    from portfolio_rag.config.settings import get_config

    config = get_config()

    logger = logging.getLogger(name)

    log_level = level or config.logging.level
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Avoid duplicate handlers on repeated app creation
    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=config.logging.format, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_path = log_file or config.logging.file_path
    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module."""
    return logging.getLogger(name)


def preview(text: str, limit: int = 50) -> str:
    """Shorten user text for log lines."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."
