"""Logging setup for the recipes buddy backend.

Two output formats:
    - Human-readable lines for development: ``HH:MM:SS [LEVEL] module: message``
    - JSON lines for production log aggregators

Modules log through ``logging.getLogger(__name__)``; everything under the
``recipes_buddy`` namespace goes through the handler installed here.
"""
import json
import logging
import sys
from datetime import datetime, timezone

ROOT_LOGGER_NAME = "recipes_buddy"


class StructuredFormatter(logging.Formatter):
    """JSON log formatter for production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.funcName:
            log_data["function"] = record.funcName
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable log formatter for development."""

    FORMAT = "%(asctime)s [%(levelname)s] %(module)s: %(message)s"

    def __init__(self):
        super().__init__(self.FORMAT, datefmt="%H:%M:%S")


def setup_logging(level: str = "INFO", production: bool = False, stream=None) -> logging.Logger:
    """Configure the ``recipes_buddy`` logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        production: Use JSON format if True, human-readable if False
        stream: Output stream (defaults to stdout)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    if production:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    return logger
