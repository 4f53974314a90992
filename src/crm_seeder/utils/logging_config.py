"""Structured logger setup shared across handlers and services."""

import logging
import os

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "crm-seeder"
DEFAULT_LOG_LEVEL = "INFO"


def _level() -> int:
    name = os.environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """
    Configure a JSON logger once per name and reuse it.

    Every workflow already returns a human-readable narrative, so process logs
    stay machine-oriented: each line carries the service name plus whatever
    ids and counts the caller passes as ``extra``. ``LOG_LEVEL`` sets the
    threshold.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(levelname)s %(name)s %(message)s %(asctime)s",
            static_fields={"service": SERVICE_NAME},
        )
    )
    logger.addHandler(handler)
    logger.setLevel(_level())
    logger.propagate = False
    return logger
