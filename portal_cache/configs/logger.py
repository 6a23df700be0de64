"""File logging helper shared by every module."""

from logging import INFO, Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

from portal_cache.configs.settings import settings

_MAX_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 5


def file_logger(logger: Logger) -> Logger:
    """
    Attach the rotating JSON file handler to a logger when file logging is on.

    Args:
        logger: Module logger, usually ``getLogger(__name__)``.

    Returns:
        The same logger, for ``logger = file_logger(getLogger(__name__))``.
    """
    if not settings.LOG_TO_FILE:
        return logger

    log_file = Path(settings.LOG_FILE)
    if any(
        isinstance(handler, RotatingFileHandler)
        and Path(handler.baseFilename) == log_file.resolve()
        for handler in logger.handlers
    ):
        return logger

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT)
    handler.setLevel(INFO)
    handler.setFormatter(JsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger
