"""
Logging setup for aipi using Python's standard logging
with JSON formatting for structured logs.

Log destinations:
- Console (stderr): Human-readable format for debugging
- <log_dir>/events.jsonl: JSON format for lifecycle events (only when AIPI_LOG_DIR is set)
- <log_dir>/errors.jsonl: JSON format for error tracking (only when AIPI_LOG_DIR is set)
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys

from pathlib import Path
from typing import Any

from pythonjsonlogger import json as jsonlogger

from aipi.core.constants import (
    LOG_BACKUP_COUNT_ERRORS,
    LOG_BACKUP_COUNT_EVENTS,
    LOG_MAX_SIZE,
    get_settings,
)


class EventFilter(logging.Filter):
    """Filter to allow all INFO level logs for lifecycle events"""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.INFO


class ErrorFilter(logging.Filter):
    """Filter to only allow ERROR and CRITICAL logs"""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that adds colors to log levels.
    Format: HH:MM:SS [LEVEL] logger_name - message
    """

    GREY = "\x1b[38;20m"
    GREEN = "\x1b[32;20m"
    YELLOW = "\x1b[33;20m"
    RED = "\x1b[31;20m"
    BOLD_RED = "\x1b[31;1m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        level_fmt = f"[{record.levelname}]"
        color = self.LEVEL_COLORS.get(record.levelno)
        if color:
            level_fmt = f"{color}{level_fmt}{self.RESET}"

        asctime = self.formatTime(record, "%H:%M:%S")
        message = f"{asctime} {level_fmt} {record.name} - {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def setup_logging(name: str = "aipi", debug: bool | None = None) -> logging.Logger:
    """
    Set up logging with console and optional JSON file handlers.

    Args:
        name: Logger name
        debug: Enable debug logging (overrides AIPI_DEBUG / DEBUG env vars)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)  # Capture all, filter at handler level
    logger.handlers = []
    logger.propagate = False

    settings = get_settings()

    if debug is None:
        debug = settings.debug or os.getenv("DEBUG", "false").lower() in ("true", "1", "yes")

    # --- Console Handler (Human-readable) ---
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    console_handler.setFormatter(ColoredConsoleFormatter())
    logger.addHandler(console_handler)

    if not settings.log_dir:
        return logger

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    # --- Event Log Handler (JSON) ---
    event_handler = logging.handlers.RotatingFileHandler(
        log_dir / "events.jsonl",
        maxBytes=LOG_MAX_SIZE,
        backupCount=LOG_BACKUP_COUNT_EVENTS,
        encoding="utf-8",
    )
    event_handler.setLevel(logging.INFO)
    event_handler.addFilter(EventFilter())
    event_handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(timestamp)s %(levelname)s %(message)s %(chat_id)s %(agent_id)s %(resource)s",
            timestamp=True,
        )
    )
    logger.addHandler(event_handler)

    # --- Error Log Handler (JSON) ---
    error_handler = logging.handlers.RotatingFileHandler(
        log_dir / "errors.jsonl",
        maxBytes=LOG_MAX_SIZE,
        backupCount=LOG_BACKUP_COUNT_ERRORS,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.addFilter(ErrorFilter())
    error_handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(timestamp)s %(levelname)s %(name)s %(message)s",
            timestamp=True,
        )
    )
    logger.addHandler(error_handler)

    return logger


class AipiLogger:
    """
    High-level logging interface for aipi.
    Wraps standard Python logging; keyword arguments become structured fields.
    """

    def __init__(self, name: str = "aipi"):
        self.name = name
        self._logger: logging.Logger | None = None

    @property
    def logger(self) -> logging.Logger:
        # Configured lazily so settings are read after the environment is ready
        if self._logger is None:
            self._logger = setup_logging(self.name)
        return self._logger

    def debug(self, message: str, **kwargs: Any) -> None:
        """Debug level logging"""
        self.logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Info level logging"""
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Warning level logging"""
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        """Error level logging with optional exception info"""
        self.logger.error(message, extra=kwargs, exc_info=exc_info)


# Global logger instance
logger = AipiLogger()
