"""Logging configuration helpers for the mock test application."""

from __future__ import annotations

import logging
from logging import Logger


def configure_logging(level: str | int = logging.INFO) -> Logger:
    """Configure logging for the application and return its package logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # httpx logs every generation request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logging.getLogger("techmock_app")
