"""Central logging setup.

Logs go to stderr so they never mix with rendered output on stdout, with
an optional rotating log file.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    rotate_bytes: int = 5 * 1024 * 1024,
    rotate_keep: int = 3,
) -> None:
    resolved = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)

    if log_file:
        handler = RotatingFileHandler(
            log_file,
            maxBytes=rotate_bytes,
            backupCount=rotate_keep,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(handler)
