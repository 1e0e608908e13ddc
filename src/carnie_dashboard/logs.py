"""File logging for the dashboard.

A full-screen TUI owns the terminal, so log records go to a rotating file.
"""

import logging
from logging.handlers import RotatingFileHandler
import os
from typing import Optional

PACKAGE_LOGGER = "carnie_dashboard"
MAX_BYTES = 1_000_000
BACKUP_COUNT = 3


def setup_logging(path, level="WARNING"):
    # type: (str, str) -> Optional[RotatingFileHandler]
    """Attach a rotating file handler to the package logger.

    Calling it again is a no-op while a handler is already attached.  An
    empty ``path`` disables file logging.
    """
    log = logging.getLogger(PACKAGE_LOGGER)
    log.setLevel(level)
    if not path:
        return None
    for existing in log.handlers:
        if isinstance(existing, RotatingFileHandler):
            return existing

    path = os.path.expanduser(path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    log.addHandler(handler)
    log.propagate = False
    return handler
