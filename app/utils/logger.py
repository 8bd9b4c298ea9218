# app/utils/logger.py
"""
Logging setup for the marketplace backend.
One console handler and one size-rotated file (settings.LOG_FILE under logs/),
attached to the root logger the first time any module asks for a logger.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from app.config import settings

LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Third-party loggers that flood INFO with per-statement / per-request lines
QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "urllib3")

_configured = False


def configure_logging(level: str = None):
    global _configured
    if _configured:
        return
    _configured = True

    level = (level or settings.LOG_LEVEL).upper()
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    os.makedirs(LOG_DIR, exist_ok=True)
    handlers = [
        logging.StreamHandler(),
        RotatingFileHandler(
            filename=os.path.join(LOG_DIR, settings.LOG_FILE),
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding="utf-8",
        ),
    ]

    root = logging.getLogger()
    root.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Named logger; the first call configures handlers."""
    configure_logging()
    return logging.getLogger(name)
