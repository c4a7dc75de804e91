"""
Logging setup shared by the availability engine, the booking service and
the HTTP API. Every component logs to stdout; components that record
bookings also keep their own rotating file under the log directory.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(filename)s:%(lineno)d] - %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(log_level: Optional[str]) -> int:
    if not log_level:
        return logging.INFO
    return getattr(logging, str(log_level).upper(), logging.INFO)


def _rotating_handler(
    log_dir: str, log_file: str, max_bytes: int, backup_count: int
) -> RotatingFileHandler:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        directory / log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )


def setup_logging(
    name: str,
    log_level: Optional[str] = "INFO",
    log_file: Optional[str] = None,
    log_dir: str = "logs",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure a component logger once and return it.

    Args:
        name: Logger name, usually the module's __name__
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: File name inside `log_dir`; stdout only when omitted
        log_dir: Directory holding the rotating files
        max_bytes: Size at which the file is rotated
        backup_count: Rotated files kept
        format_string: Overrides DEFAULT_FORMAT

    Returns:
        The logger
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        # configured by an earlier import of the same module
        return logger

    level = _resolve_level(log_level)
    logger.setLevel(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(_rotating_handler(log_dir, log_file, max_bytes, backup_count))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str, **kwargs) -> logging.Logger:
    """
    Logger using the level and directory from the application settings.

    Keyword arguments take precedence (e.g. log_file="booking.log").
    """
    from config import settings

    kwargs.setdefault("log_level", settings.log_level)
    kwargs.setdefault("log_dir", settings.log_dir)
    return setup_logging(name, **kwargs)
