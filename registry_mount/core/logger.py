#!/usr/bin/env python3
"""
Logging configuration for the registry mount supervisor.
Logs to stdout (container log stream) and optionally to a file.

Records carry the thread name: mount helper output and background driver
failures come from MountDriver-<path> threads, mount table checks from
MountPoller-<path> threads.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

# Mapping from string levels to logging constants
LOG_LEVELS = {
    "OFF": logging.CRITICAL + 10,    # Higher than CRITICAL = disable all
    "DEBUG": logging.DEBUG,          # 10
    "INFO": logging.INFO,            # 20
    "WARNING": logging.WARNING,      # 30
    "WARN": logging.WARNING,         # 30 (alias)
    "ERROR": logging.ERROR,          # 40
    "CRITICAL": logging.CRITICAL,    # 50
    "FATAL": logging.CRITICAL,       # 50 (alias)
}

ROOT_LOGGER_NAME = "registry_mount"

LOG_FORMAT = '%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def build_formatter() -> logging.Formatter:
    """Formatter shared by the console and file handlers"""
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Setup logging configuration.

    Args:
        log_level: Logging level as string (OFF, DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file, or None for stdout only

    Returns:
        Configured package logger

    Raises:
        ValueError: If log_level is invalid
    """
    level_str_upper = log_level.upper()
    if level_str_upper not in LOG_LEVELS:
        valid_levels = ", ".join(sorted(LOG_LEVELS.keys()))
        raise ValueError(
            f"Invalid log level: '{log_level}'. Must be one of: {valid_levels}"
        )

    numeric_level = LOG_LEVELS[level_str_upper]

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Nothing will be emitted at OFF, no handlers needed
    if level_str_upper == "OFF":
        logger.propagate = True
        return logger

    logger.handlers.clear()

    formatter = build_formatter()

    # 1. Console handler (container stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 2. File handler (for persistent logs)
    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            # Mount paths may hold undecodable bytes (surrogate escapes)
            file_handler = logging.FileHandler(
                log_file, encoding='utf-8', errors='backslashreplace'
            )
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

            logger.debug(f"File logging enabled: {log_file}")
        except OSError as e:
            logger.warning(f"Could not setup file logging: {e}")

    logger.propagate = False

    return logger

def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually module name)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
