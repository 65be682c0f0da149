"""Logging for the engine and its scripts.

Engine modules only call get_logger; setup_logging is for entry points
(the sweep and seed scripts, or the host application).
"""

import logging
import sys

from caseflow.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Library loggers that are chatty at INFO (httpx logs every channel request).
_QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine")


def setup_logging(level: int | None = None) -> None:
    """Configure root logging to stdout.

    Args:
        level: Explicit level; defaults to DEBUG when settings.debug, else INFO.
    """
    if level is None:
        level = logging.DEBUG if get_settings().debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name (usually __name__)."""
    return logging.getLogger(name)
