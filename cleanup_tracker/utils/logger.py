# cleanup_tracker/utils/logger.py
"""
Logging setup, configured once per process.

Two channels:
- application log: console + logs/tracker.log, every module via get_logger()
- audit log: logs/audit.log, who did what to which job or PIN; records also
  propagate to the application log
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from cleanup_tracker.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
AUDIT_LOGGER_NAME = "cleanup_tracker.audit"

FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that are chatty at INFO
QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "urllib3")

_configured = False


def _rotating_file(filename: str, level) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=os.path.join(LOG_DIR, filename),
        maxBytes=5 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=FORMAT, datefmt=DATE_FORMAT))
    return handler


def _configure():
    global _configured
    if _configured:
        return
    _configured = True
    os.makedirs(LOG_DIR, exist_ok=True)

    console = logging.StreamHandler()
    console.setLevel(LOG_LEVEL)
    console.setFormatter(logging.Formatter(fmt=FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    root.addHandler(console)
    root.addHandler(_rotating_file("tracker.log", LOG_LEVEL))

    audit = logging.getLogger(AUDIT_LOGGER_NAME)
    audit.setLevel(logging.INFO)
    audit.addHandler(_rotating_file("audit.log", logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure()
    return logging.getLogger(name)


def get_audit_logger() -> logging.Logger:
    """Logger for job transitions, QC decisions, logins and PIN changes."""
    _configure()
    return logging.getLogger(AUDIT_LOGGER_NAME)
