# src/pricefeed/shared/logging_conf.py
"""
Logging Configuration - Root Logger Setup

Every module logs through ``logging.getLogger(__name__)``; this module only
decides where those records go. The CLI calls setup_logging once, with
values from Settings (LOG_LEVEL, LOG_FILE, LOG_DIR, PRICEFEED_LOG_STDOUT,
LOG_MAX_BYTES, LOG_BACKUP_COUNT). Library users are free to configure
logging themselves instead.

Files that USE this module:
- pricefeed.app (CLI entry point)
- tests.test_logging_conf (unit tests)

Files that this module USES:
- None (pure configuration module)
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO, List, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "pricefeed.log"

# Third-party loggers that are too chatty below WARNING
NOISY_LOGGERS = ("urllib3", "requests")

PathLike = Union[str, Path]


def resolve_log_path(log_file: Optional[PathLike] = None, log_dir: Optional[PathLike] = None) -> Optional[Path]:
    """
    Work out which file to log to.

    A log directory wins over an explicit file name; inside it the file is
    always pricefeed.log.

    Returns:
        Path of the log file, or None when file logging is off
    """
    if log_dir:
        return Path(log_dir) / LOG_FILE_NAME
    if log_file:
        return Path(log_file)
    return None


def _rotating_handler(path: Path, max_bytes: int, backup_count: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[PathLike] = None,
    log_dir: Optional[PathLike] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    console: bool = True,
    stream: Optional[IO[str]] = None,
) -> Optional[Path]:
    """
    Configure the root logger, replacing any handlers it already has.

    Args:
        level: Level as int or name ("DEBUG", "INFO", ...)
        log_file: Log to this file (rotated)
        log_dir: Log to pricefeed.log in this directory (rotated)
        max_bytes: Rotate the file once it reaches this size
        backup_count: Number of rotated files to keep
        console: Also log to a console stream
        stream: Console stream (default: sys.stdout); the CLI passes stderr

    Returns:
        Path of the log file, or None when logging to the console only
    """
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers: List[logging.Handler] = []

    log_path = resolve_log_path(log_file, log_dir)
    if log_path is not None:
        handlers.append(_rotating_handler(log_path, max_bytes, backup_count))

    # Never leave the root logger without a handler
    if console or not handlers:
        handlers.append(logging.StreamHandler(stream or sys.stdout))

    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured: level=%s file=%s console=%s", level, log_path, console
    )
    return log_path
