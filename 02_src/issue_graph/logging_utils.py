"""Package loggers; handler setup is left to the CLI entrypoint."""

from __future__ import annotations

import logging
from typing import Final

PACKAGE_LOGGER: Final[str] = "issue_graph"
_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_handler: logging.Handler | None = None


def get_logger(name: str) -> logging.Logger:
    """Return a module logger without touching handlers or levels."""
    return logging.getLogger(name)


def configure_logging(level_name: str = "INFO") -> logging.Logger:
    """Attach one stderr handler to the package logger and set its level.

    Repeated calls only change the level. The root logger is left alone.
    """
    global _handler

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        package_logger.addHandler(_handler)
    package_logger.setLevel(getattr(logging, level_name.upper(), logging.INFO))
    return package_logger
