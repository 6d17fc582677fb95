"""
Logging configuration module.

Library code only ever calls ``get_logger``; handlers are installed by
applications (and by the bundled CLI) through ``setup_logging``:
- Console output with colors
- File logging with rotation
- JSON structured logging
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pythonjsonlogger import jsonlogger

LOGGER_NAMESPACE = "balena_settings"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """
    Colored log formatter for console output.

    Adds ANSI color codes based on log level.
    """

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        use_colors: bool = True,
    ) -> None:
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record with optional colors.

        The record is copied so other handlers still see the plain level name.
        """
        if self.use_colors and record.levelname in self.COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = (
                f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"
            )
        return super().format(record)


class SettingsJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter with source-location fields.

    Adds the config file and setting name when a record carries them.
    """

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        if hasattr(record, "config_file"):
            log_record["config_file"] = record.config_file
        if hasattr(record, "setting"):
            log_record["setting"] = record.setting


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
    use_colors: bool = True,
) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file (None for console only).
        json_format: Use JSON format for logs.
        use_colors: Use colored console output.

    Returns:
        Configured package logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    root_logger.setLevel(numeric_level)

    # Clear existing handlers
    root_logger.handlers = []

    # stderr keeps stdout clean for command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)

    if json_format:
        console_formatter: Union[SettingsJsonFormatter, ColoredFormatter] = SettingsJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s"
        )
    else:
        console_formatter = ColoredFormatter(
            fmt=DEFAULT_FORMAT,
            datefmt=DEFAULT_DATEFMT,
            use_colors=use_colors and sys.stderr.isatty(),
        )

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(numeric_level)

            if json_format:
                file_formatter: Union[SettingsJsonFormatter, logging.Formatter] = SettingsJsonFormatter(
                    "%(timestamp)s %(level)s %(name)s %(message)s"
                )
            else:
                file_formatter = logging.Formatter(
                    fmt=DEFAULT_FORMAT,
                    datefmt=DEFAULT_DATEFMT,
                )

            file_handler.setFormatter(file_formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Failed to configure file handler: {e}")

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically module name).

    Returns:
        Logger instance.
    """
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
