"""Logging configuration with Rich formatting.

Provides setup_logging() for script initialization and get_logger() for module-level loggers.
"""

import logging
from rich.logging import RichHandler
from .config import get_settings

def setup_logging():
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)]
    )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

def get_logger(name: str):
    return logging.getLogger(f"fs_sources.{name}")
