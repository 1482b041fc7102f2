"""Logging configuration for TaleLeaf.

Console output is always enabled; a rotating file handler is added when a
log file is configured.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Configure the ``taleleaf`` logger hierarchy.

    Args:
        log_level: Level name such as "INFO" or "DEBUG".
        log_file: Optional log file path; parent directories are created.
        max_bytes: Size at which the log file is rotated.
        backup_count: Number of rotated files to keep.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger("taleleaf")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    logger.debug("Logging initialized: level=%s, file=%s", level, log_file)
