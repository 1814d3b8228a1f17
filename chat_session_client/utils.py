"""
Utility functions and helpers for the Chat Session Client.

This module provides common utilities for logging, filesystem handling
and user-facing error formatting.
"""

import logging
import re
import sys
from typing import Optional
from pathlib import Path

from .exceptions import ChatSessionClientError
from .logging_config import StructuredFormatter


LOGGER_NAME = "chat_session_client"


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None,
                  structured: bool = False) -> logging.Logger:
    """
    Set up logging configuration for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path. If None, logs to console only.
        structured: Emit JSON lines instead of plain text

    Returns:
        logging.Logger: Configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Clear existing handlers
    logger.handlers.clear()

    if structured:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def ensure_directory_exists(path) -> None:
    """
    Ensure that a directory exists, creating it if necessary.

    Raises:
        OSError: If directory cannot be created
    """
    Path(path).mkdir(parents=True, exist_ok=True)


def safe_path_component(value: str) -> str:
    """
    Turn an arbitrary identifier into a single safe path component.

    Args:
        value: Identifier such as a user id

    Returns:
        str: Identifier with every character outside [A-Za-z0-9._-] replaced by '_'
    """
    cleaned = re.sub(r'[^A-Za-z0-9._-]', '_', value)
    if cleaned in ('', '.', '..'):
        cleaned = cleaned.replace('.', '_') or '_'
    return cleaned


def format_error(error: Exception) -> str:
    """Format an error for display on the command line."""
    if isinstance(error, ChatSessionClientError):
        message = f"❌ Error: {error.message}"
        if error.details:
            message += f"\n   Details: {error.details}"
        return message
    return f"❌ Unexpected error: {error}"
