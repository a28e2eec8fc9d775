"""Logging setup for kbimport.

Log files go to ``<data_dir>/logs/local-YYYY-MM-DD.log``. A console handler
is only attached at DEBUG so normal command output stays clean.
"""

import logging
from datetime import datetime
from typing import Any

from kbimport.utils import get_kbimport_home

LOGGER_NAME = "kbimport"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_kbimport_logging(level: str = "INFO") -> logging.Logger:
    """Configure and return the ``kbimport`` logger.

    Safe to call more than once; handlers are only added the first time.
    Unknown level names fall back to INFO.
    """
    logger = logging.getLogger(LOGGER_NAME)
    log_level = _LEVELS.get(str(level).upper(), logging.INFO)
    logger.setLevel(log_level)

    formatter = logging.Formatter(LOG_FORMAT)

    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        log_dir = get_kbimport_home() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"local-{datetime.now().strftime('%Y-%m-%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    )
    if log_level == logging.DEBUG and not has_console:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        logger.addHandler(console)

    return logger


def log_import_event(event: str, **fields: Any) -> None:
    """Write one ``event key=value ...`` line at INFO."""
    parts = [event] + [f"{key}={value}" for key, value in fields.items()]
    logging.getLogger(LOGGER_NAME).info(" ".join(parts))
