"""Logging configuration for the application."""

import logging
import sys

from vendorflow.core.config import get_settings

# httpx logs every PostgREST call at INFO; keep those at WARNING unless debugging.
_NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine")


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout. Transport loggers of the storage backends stay
    at WARNING outside debug mode.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.debug:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name."""
    return logging.getLogger(name)
