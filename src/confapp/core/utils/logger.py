# confapp/core/utils/logger.py

"""
Logging configuration and utilities for confapp.

This module provides centralized logging configuration and utility functions
for consistent error reporting and debugging across all confapp modules.

The logging system is designed to provide:
- Consistent log formatting across all modules
- Console output on stderr so command output on stdout stays parseable
- Optional file output and JSON line formatting
- Configuration change and file operation logging

Key Features:
- Global logger instance with lazy initialization
- Standardized ``[MODULE] message`` format
- Level names as used by the ``log.level`` field (``warn`` is accepted)
"""

import json
import logging
import sys
from typing import Any

# Global logger instance for singleton pattern
# This ensures all modules use the same logger configuration
_logger: logging.Logger | None = None

LOGGER_NAME = "confapp"

# Default logging configuration values
# These are replaced by the log.* fields once configuration is loaded
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Accepted spellings of level names, mapped to logging levels
_LEVEL_ALIASES = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def resolve_level(level: str) -> int:
    """
    Translate a level name into a ``logging`` level.

    Args:
        level: Level name such as ``debug``, ``info``, ``warn`` or ``ERROR``

    Returns:
        The numeric logging level

    Raises:
        ValueError: If the name is not a known level
    """
    try:
        return _LEVEL_ALIASES[level.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown log level: {level}") from None


def setup_logging(
    level: str = DEFAULT_LOG_LEVEL,
    log_file: str | None = None,
    log_format: str = "text",
    format_string: str | None = None,
) -> logging.Logger:
    """
    Set up logging configuration for confapp.

    This function initializes the global logging system with console and
    optional file output. It creates a singleton logger instance that
    can be used throughout the application.

    Args:
        level: Logging level (debug, info, warn, error)
        log_file: Path to log file (optional). If provided, logs will be
                 written to both console and file.
        log_format: ``text`` for the classic format, ``json`` for one JSON
                   object per line
        format_string: Custom text format string (optional)

    Returns:
        Configured logger instance

    Note:
        Subsequent calls reconfigure the same logger instance. The file is
        opened lazily, on the first record written to it.
    """
    global _logger

    logger = logging.getLogger(LOGGER_NAME)
    logger.disabled = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    numeric_level = resolve_level(level)
    logger.setLevel(numeric_level)
    logger.propagate = False

    if log_format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(format_string or DEFAULT_LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, delay=True)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """
    Get the global logger instance.

    If the logger hasn't been initialized yet, it will be set up
    with default configuration.
    """
    if _logger is None:
        return setup_logging()
    return _logger


def _format(module: str, message: str, context: str = "") -> str:
    formatted = f"[{module.upper()}] {message}"
    if context:
        formatted += f" | Context: {context}"
    return formatted


def log_error(
    module: str, error: str, context: str = "", exception: Exception | None = None
) -> None:
    """
    Log a standardized error message.

    Args:
        module: Name of the module where the error occurred
        error: Error message describing what went wrong
        context: Additional context information (optional)
        exception: Exception object to include stack trace (optional)
    """
    logger = get_logger()
    if exception:
        logger.error(_format(module, error, context), exc_info=exception)
    else:
        logger.error(_format(module, error, context))


def log_warning(module: str, warning: str, context: str = "") -> None:
    """Log a standardized warning message."""
    get_logger().warning(_format(module, warning, context))


def log_info(module: str, message: str, context: str = "") -> None:
    """Log a standardized info message."""
    get_logger().info(_format(module, message, context))


def log_debug(module: str, message: str, context: str = "") -> None:
    """Log a standardized debug message."""
    get_logger().debug(_format(module, message, context))


def log_configuration_change(setting: str, old_value: Any, new_value: Any) -> None:
    """
    Log a configuration change.

    Args:
        setting: Name of the setting that changed
        old_value: Previous value of the setting
        new_value: New value of the setting
    """
    get_logger().debug(f"Configuration changed: {setting} = {old_value} -> {new_value}")


def log_file_operation(
    operation: str, file_path: str, success: bool, error: str | None = None
) -> None:
    """
    Log a file operation.

    Args:
        operation: Type of operation (read, write, ...)
        file_path: Path to the file being operated on
        success: Whether the operation was successful
        error: Error message if the operation failed (optional)
    """
    logger = get_logger()
    if success:
        logger.debug(f"File {operation}: {file_path}")
    else:
        logger.error(f"File {operation} failed: {file_path} - {error}")


def reset_logging() -> None:
    """
    Reset the global logger instance.

    This is useful for testing or when you need to reconfigure
    the logging system from scratch.
    """
    global _logger
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    _logger = None
