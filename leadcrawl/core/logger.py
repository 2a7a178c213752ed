"""Logging setup for the leadcrawl package.

Modules log through ``logging.getLogger(__name__)``. Entry points (the API
lifespan and each CLI command) call :func:`configure_logging` once, which
attaches a console handler and a size-rotated file handler to the package
logger so every ``leadcrawl.*`` module logger inherits them.

Examples:
    >>> from leadcrawl.core.config import Settings
    >>> from leadcrawl.core.logger import configure_logging
    >>> configure_logging(Settings())
    >>> logging.getLogger("leadcrawl.services.crawler").info("Crawl started")
    2026-10-18 12:00:00,123 | leadcrawl.services.crawler | INFO | Crawl started
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from leadcrawl.core.config import Settings

PACKAGE_LOGGER = "leadcrawl"

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

# 100MB per file, 5 rotated backups
MAX_LOG_BYTES = 100 * 1024 * 1024
BACKUP_COUNT = 5


def build_file_handler(log_file: Path) -> RotatingFileHandler:
    """Rotating DEBUG-level handler; creates the parent directory."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file, maxBytes=MAX_LOG_BYTES, backupCount=BACKUP_COUNT
    )
    handler.setLevel(logging.DEBUG)
    return handler


def configure_logging(
    settings: Settings,
    console: bool = True,
    name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """Point the package logger at the console and ``settings.log_file``.

    Handlers from a previous call are removed and closed first, so calling
    this again (e.g. once per CLI invocation in the same process) never
    duplicates output or leaks file handles.

    Args:
        settings: Source of ``log_level`` and ``log_file``
        console: Also log INFO and above to stderr
        name: Logger to configure; tests pass a private name

    Returns:
        The configured logger

    Raises:
        OSError: If the log directory cannot be created
    """
    logger = logging.getLogger(name)
    logger.setLevel(settings.log_level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [build_file_handler(settings.log_file)]
    if console:
        stream = logging.StreamHandler()
        stream.setLevel(logging.INFO)
        handlers.append(stream)

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug(
        "Logging configured at %s -> %s", settings.log_level, settings.log_file
    )
    return logger
