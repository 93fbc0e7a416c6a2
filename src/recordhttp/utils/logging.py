"""
logging.py
----------
Loggers for recordhttp all hang off the "recordhttp" logger. Importing the
package configures nothing; the entry points (the API module and the
Celery worker_init hook) call setup_logging once.
"""
import logging
import sys
from typing import Optional

ROOT_LOGGER = "recordhttp"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stdout handler to the package logger. Safe to call more than once."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper()))
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)
