"""
Logging Configuration Module

Console logging for every module, plus an optional timestamped log file
that the setup command appends to on each run.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional

# Cache configured loggers to avoid duplicate handlers
_loggers: dict[str, logging.Logger] = {}

# Shared file handler, attached to every logger once enabled
_file_handler: Optional[logging.FileHandler] = None

_console_level: int = logging.DEBUG

CONSOLE_FORMAT = '[%(levelname)s] %(message)s'
FILE_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def _is_console_handler(handler: logging.Handler) -> bool:
    return type(handler) is logging.StreamHandler


def set_verbose(enabled: bool) -> None:
    """Show DEBUG output on the console when enabled, INFO and above otherwise."""
    global _console_level
    _console_level = logging.DEBUG if enabled else logging.INFO

    for logger in _loggers.values():
        for handler in logger.handlers:
            if _is_console_handler(handler):
                handler.setLevel(_console_level)


def enable_file_log(path: Path) -> logging.FileHandler:
    """
    Append all log records to a timestamped log file.

    The handler is attached to every logger created so far and to every
    logger created later through get_logger().

    Args:
        path: Log file location (opened in append mode)

    Returns:
        The shared FileHandler
    """
    global _file_handler
    if _file_handler is not None:
        if _file_handler.baseFilename == os.path.abspath(path):
            return _file_handler
        disable_file_log()

    handler = logging.FileHandler(path, mode='a', encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    _file_handler = handler

    for logger in _loggers.values():
        logger.addHandler(handler)
    return handler


def disable_file_log() -> None:
    """Detach and close the shared file handler, if any."""
    global _file_handler
    if _file_handler is None:
        return
    for logger in _loggers.values():
        if _file_handler in logger.handlers:
            logger.removeHandler(_file_handler)
    _file_handler.close()
    _file_handler = None


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger for the given module name.

    Logs go to stdout as '[LEVEL] message'. When a file log is enabled
    the same records are also written there with timestamps.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured Logger instance
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Prevent propagation to root logger to avoid duplicate logs
    logger.propagate = False

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(_console_level)
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(handler)

    if _file_handler is not None and _file_handler not in logger.handlers:
        logger.addHandler(_file_handler)

    _loggers[name] = logger
    return logger
