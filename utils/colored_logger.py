"""
Simple colored logging utility that matches uvicorn's format.
Provides consistent spacing and per-component coloring.
"""

import logging
import sys
from pathlib import Path
from datetime import datetime

ISO_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Custom formatter that matches uvicorn's spacing and adds colors."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # cyan
        "INFO": "\033[32m",  # green
        "WARNING": "\033[33m",  # yellow
        "ERROR": "\033[31m",  # red
        "CRITICAL": "\033[35m",  # magenta
    }
    RESET = "\033[0m"

    def format(self, record):
        """
        Format log record with colors matching uvicorn style.

        Args:
            record: LogRecord instance to format

        Returns:
            Formatted log message with ANSI color codes
        """
        # Match uvicorn's format: "INFO:     component:message"
        level_color = self.COLORS.get(record.levelname, "")
        return (
            f"{level_color}{record.levelname}:{self.RESET}     "
            f"{record.name}:{record.getMessage()}"
        )


class PlainFormatter(logging.Formatter):
    """Plain formatter for file logging (no colors)."""

    def format(self, record):
        """
        Format log record for file output without colors.

        Args:
            record: LogRecord instance to format

        Returns:
            Formatted log message with timestamp and level
        """
        timestamp = datetime.fromtimestamp(record.created).strftime(
            ISO_DATETIME_FORMAT
        )
        # Format: timestamp LEVEL component:message
        return f"{timestamp} {record.levelname:8} {record.name}:{record.getMessage()}"


def _console_handler() -> logging.Handler:
    # stderr: stdout carries the terminal title escape sequences
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter())
    return handler


def setup_logger(name: str) -> logging.Logger:
    """
    Set up a logger with uvicorn-style formatting.

    Records propagate to the root logger, which owns the handlers once
    configure_root_logging() has run. Until then the logger gets its own
    console handler so early messages are not lost.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    root_configured = bool(logging.getLogger().handlers)

    if not logger.handlers and not root_configured:
        logger.addHandler(_console_handler())

    logger.propagate = True
    logger.setLevel(logging.INFO)
    return logger


def setup_file_logging(session_id: str, log_dir: str = "logs") -> str:
    """
    Setup file logging for one host session.

    Args:
        session_id: Session identifier used as the log filename
        log_dir: Directory to store logs (default: "logs")

    Returns:
        Path to the log file
    """
    log_path = Path(log_dir).expanduser()
    log_path.mkdir(parents=True, exist_ok=True)

    log_file = log_path / f"{session_id}.log"

    # Check if file handler already exists for this file
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == str(
            log_file.absolute()
        ):
            return str(log_file)

    file_handler = logging.FileHandler(log_file, mode="a")  # Append mode
    file_handler.setFormatter(PlainFormatter())
    root_logger.addHandler(file_handler)

    return str(log_file)


def configure_root_logging():
    """Configure root logging to match uvicorn style."""
    root_logger = logging.getLogger()
    if not any(isinstance(h.formatter, ColoredFormatter) for h in root_logger.handlers):
        # Remove existing handlers
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        root_logger.addHandler(_console_handler())
        root_logger.setLevel(logging.INFO)

    # Loggers created before root was configured hand over to the root handlers
    for logger in logging.Logger.manager.loggerDict.values():
        if not isinstance(logger, logging.Logger):
            continue
        for handler in logger.handlers[:]:
            if isinstance(handler.formatter, ColoredFormatter):
                logger.removeHandler(handler)
