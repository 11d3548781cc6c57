"""
Logging Configuration and Utilities

Every module logs under the ``keep_keeping`` namespace. Console records go
to stderr, optionally as JSON lines; a rotating log file can be added.

Author: Keep Keeping Project
License: MIT
"""

import copy
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from pythonjsonlogger.json import JsonFormatter
from typing import Optional


ROOT_LOGGER_NAME = "keep_keeping"

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# (plain text, JSON field list) per destination
CONSOLE_FORMATS = (
    '[%(asctime)s] %(levelname)s - %(name)s - %(message)s',
    '%(asctime)s %(name)s %(levelname)s %(message)s',
)
FILE_FORMATS = (
    '[%(asctime)s] %(levelname)s - %(name)s - %(module)s:%(lineno)d - %(message)s',
    '%(asctime)s %(name)s %(levelname)s %(module)s %(lineno)d %(message)s',
)


class ColoredFormatter(logging.Formatter):
    """Level names coloured with ANSI escapes, for terminals."""
    
    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'
    
    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        # The record is shared with the file handler
        record = copy.copy(record)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _make_formatter(formats, json_format: bool, colored: bool = False) -> logging.Formatter:
    text_format, json_fields = formats
    if json_format:
        return JsonFormatter(json_fields)
    if colored:
        return ColoredFormatter(text_format, datefmt=DATE_FORMAT)
    return logging.Formatter(text_format, datefmt=DATE_FORMAT)


def setup_logging(
    log_level: str = "INFO",
    log_to_file: bool = False,
    log_file_path: Optional[str] = None,
    log_rotation_size: int = 10485760,  # 10MB
    log_retention_count: int = 5,
    json_format: bool = False
) -> logging.Logger:
    """
    Configure the ``keep_keeping`` logger.
    
    Calling it again replaces the handlers of the previous call.
    
    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Also write to a rotating log file
        log_file_path: Log file location, required with log_to_file
        log_rotation_size: File size in bytes that triggers rotation
        log_retention_count: Rotated files kept
        json_format: Emit JSON objects instead of text lines
        
    Returns:
        The configured package logger
        
    Raises:
        ValueError: If log_to_file is set without a log_file_path
    """
    if log_to_file and not log_file_path:
        raise ValueError("log_file_path is required when log_to_file is enabled")
    
    level = getattr(logging, str(log_level).upper())
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False
    
    handlers = [
        (logging.StreamHandler(sys.stderr),
         _make_formatter(CONSOLE_FORMATS, json_format, colored=sys.stderr.isatty()))
    ]
    if log_to_file:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append((
            RotatingFileHandler(
                log_path,
                maxBytes=log_rotation_size,
                backupCount=log_retention_count,
                encoding='utf-8'
            ),
            _make_formatter(FILE_FORMATS, json_format)
        ))
    
    for handler, formatter in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    
    logger.debug(f"Logging initialized at {logging.getLevelName(level)} level")
    if log_to_file:
        logger.debug(f"File logging enabled: {log_file_path}")
    
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name`` inside the package namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
