"""
Centralized logging configuration.
Every module gets its logger from here.

Console output starts right away. The rotating log file (and its directory)
is only created when the first record is written, so importing the package
leaves the file system alone.
"""
import logging
import logging.handlers
from pathlib import Path
from .constants import (
    LOG_LEVEL, LOG_FORMAT, LOG_FILE,
    LOG_MAX_SIZE_MB, LOG_BACKUP_COUNT
)


class DeferredRotatingFileHandler(logging.handlers.RotatingFileHandler):
    """RotatingFileHandler that creates the log directory on first write"""

    def __init__(self, filename, **kwargs):
        kwargs["delay"] = True
        super().__init__(filename, **kwargs)

    def _open(self):
        Path(self.baseFilename).parent.mkdir(parents=True, exist_ok=True)
        return super()._open()


def setup_logger(name: str = None, log_file: str = LOG_FILE) -> logging.Logger:
    """
    Get or create a configured logger.

    Args:
        name: Logger name. If None, uses 'md_translator'.
        log_file: Rotating log file path.

    Returns:
        Logger with a console handler (INFO) and a rotating file handler (DEBUG).
    """
    logger = logging.getLogger(name or 'md_translator')

    # Configure each named logger once
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL))
    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(formatter)
    logger.addHandler(console)

    file_handler = DeferredRotatingFileHandler(
        log_file,
        maxBytes=LOG_MAX_SIZE_MB * 1024 * 1024,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Usage:
        from config.logging_config import get_logger
        logger = get_logger(__name__)
    """
    return setup_logger(name)
