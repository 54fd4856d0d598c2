"""
Centralized logging configuration.
Every module obtains its logger through get_logger(__name__).

Handlers live only on top-level package loggers ('graphweaver',
'ai_providers', 'config'); module loggers propagate to them, so each
record is written once.
"""
import logging
import logging.handlers
from pathlib import Path
from typing import List, Optional
from .constants import (
    LOG_LEVEL, LOG_FORMAT, LOG_FILE,
    LOG_MAX_SIZE_MB, LOG_BACKUP_COUNT
)

ROOT_LOGGER = 'graphweaver'

# Console and rotating file handler shared by every package logger
_handlers: Optional[List[logging.Handler]] = None


def _shared_handlers() -> List[logging.Handler]:
    global _handlers
    if _handlers is None:
        # Console handler - INFO level
        console = logging.StreamHandler()
        console.setLevel(logging.INFO)
        console.setFormatter(logging.Formatter(LOG_FORMAT))

        # File handler with rotation - DEBUG level
        log_path = Path(LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            LOG_FILE,
            maxBytes=LOG_MAX_SIZE_MB * 1024 * 1024,
            backupCount=LOG_BACKUP_COUNT
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

        _handlers = [console, file_handler]
    return _handlers


def setup_logger(name: str = None) -> logging.Logger:
    """
    Get a logger, configuring its top-level package logger once.

    Usage:
        from config.logging_config import setup_logger
        logger = setup_logger(__name__)
        logger.info("Message here")

    Args:
        name: Logger name. If None, uses 'graphweaver'.

    Returns:
        logging.Logger for name. Only the package logger (the part of
        name before the first dot) carries handlers.
    """
    name = name or ROOT_LOGGER
    package = logging.getLogger(name.split('.', 1)[0])

    # Avoid adding handlers multiple times
    if not package.handlers:
        package.setLevel(getattr(logging, LOG_LEVEL))
        for handler in _shared_handlers():
            package.addHandler(handler)

    return logging.getLogger(name)


def get_logger(name: str = None) -> logging.Logger:
    """
    Alias for setup_logger for convenience.

    Usage:
        from config.logging_config import get_logger
        logger = get_logger(__name__)
    """
    return setup_logger(name)


# Singleton logger for quick imports
logger = setup_logger(ROOT_LOGGER)
