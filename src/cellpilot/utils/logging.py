"""Logging setup for CellPilot."""

from __future__ import annotations

import logging
import sys
from typing import Optional

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure the root ``cellpilot`` logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file to additionally write logs to
    """
    root = logging.getLogger("cellpilot")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Replace handlers so repeated calls (CLI + API lifespan) don't duplicate output
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``cellpilot`` namespace.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Logger instance
    """
    if not name.startswith("cellpilot"):
        name = f"cellpilot.{name}"
    return logging.getLogger(name)
