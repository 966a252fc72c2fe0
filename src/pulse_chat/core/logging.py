"""Logging setup for the Pulse Chat service."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_level: str = "INFO") -> logging.Logger:
    """Install a single stdout handler on the root logger.

    Uvicorn's loggers are routed through the same handler so that request
    logs and application logs share one format.
    """
    logger = logging.getLogger()
    logger.setLevel(log_level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.handlers = [handler]

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.propagate = False

    return logger
