"""
Logging Utilities
=================

Centralized logging configuration for envcontext.
"""

import logging
import logging.handlers
import os
import sys
from typing import Optional, Dict, Any, Iterable

APP_LOGGER_NAME = 'envcontext'


def setup_logging(
    config: Optional[Dict[str, Any]] = None,
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_file_size: str = "10MB",
    backup_count: int = 5
) -> logging.Logger:
    """
    Set up centralized logging configuration.

    Args:
        config: Configuration dictionary with an optional ``logging`` section
        log_level: Logging level
        log_file: Log file path
        max_file_size: Maximum log file size
        backup_count: Number of backup files to keep

    Returns:
        Configured logger
    """
    # Parse configuration
    if config:
        logging_config = config.get('logging', {})
        log_level = logging_config.get('level', log_level)
        log_file = logging_config.get('file', log_file)
        max_file_size = logging_config.get('max_file_size', max_file_size)
        backup_count = logging_config.get('backup_count', backup_count)

    # Convert log level string to logging constant
    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)

    # Create logs directory if it doesn't exist
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Diagnostics go to stderr so resolved output on stdout stays clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        size_bytes = _parse_size(max_file_size)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=size_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.debug(f"Logging initialized - Level: {log_level}, File: {log_file}")

    return app_logger


def _parse_size(size_str: str) -> int:
    """
    Parse size string to bytes.

    Args:
        size_str: Size string (e.g., '10MB', '1GB')

    Returns:
        Size in bytes
    """
    size_str = str(size_str).upper().strip()

    if size_str.endswith('KB'):
        return int(float(size_str[:-2]) * 1024)
    elif size_str.endswith('MB'):
        return int(float(size_str[:-2]) * 1024 * 1024)
    elif size_str.endswith('GB'):
        return int(float(size_str[:-2]) * 1024 * 1024 * 1024)
    else:
        # Assume bytes
        return int(size_str)


class DiagnosticsLogger:
    """
    Structured logging for load sessions.
    """

    def __init__(self, name: str = APP_LOGGER_NAME):
        self.logger = logging.getLogger(name)
        self.name = name

    def log_source_loaded(
        self,
        source: str,
        entries: int,
        committed: int,
        level: str = "INFO"
    ):
        """
        Log a processed source.

        Args:
            source: Source file path
            entries: Number of raw entries parsed
            committed: Number of keys committed to the store
            level: Log level
        """
        message = (
            f"SOURCE LOADED - Source: {source}, "
            f"Entries: {entries}, Committed: {committed}"
        )
        getattr(self.logger, level.lower())(message)

    def log_key_dropped(
        self,
        key: str,
        reason: str,
        source: Optional[str] = None,
        level: str = "WARNING"
    ):
        """Log a key dropped by a recoverable resolution failure."""
        message = f"KEY DROPPED - Key: {key}, Reason: {reason}"
        if source:
            message += f", Source: {source}"
        getattr(self.logger, level.lower())(message)

    def log_circular_reference(self, key: str, source: Optional[str] = None):
        """Log the fatal failure of a load session."""
        message = f"CIRCULAR REFERENCE - Key: {key}"
        if source:
            message += f", Source: {source}"
        self.logger.error(message)

    def log_session_summary(
        self,
        sources: Iterable[str],
        committed: int,
        dropped: int,
        level: str = "INFO"
    ):
        """
        Log the outcome of a load session.

        Args:
            sources: Sources processed, in order
            committed: Number of keys in the final property set
            dropped: Number of keys dropped
            level: Log level
        """
        sources = list(sources)
        message = (
            f"LOAD COMPLETE - Sources: {len(sources)}, "
            f"Properties: {committed}, Dropped: {dropped}"
        )
        getattr(self.logger, level.lower())(message)

        for source in sources:
            self.logger.debug(f"Source - {source}")
