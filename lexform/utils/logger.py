"""Logging setup shared by the API server, CLI and library modules."""

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", fmt: str = DEFAULT_FORMAT) -> None:
    """Attach a stdout handler to the root logger.

    Does nothing if the root logger already has handlers, so the server
    and the CLI can both call it safely.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL). Unknown
            names fall back to INFO.
        fmt: Log record format string.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, usually called with ``__name__``."""
    return logging.getLogger(name)
