"""Structured JSON logging for the service."""
from __future__ import annotations

import logging
from typing import Optional

import structlog

from . import __version__


def resolve_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level: {level}")
    return value


def setup_logging(level: str = "INFO", service: Optional[str] = None) -> None:
    """Render every event as one JSON line tagged with the service name."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.EventRenamer("message"),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(level=resolve_level(level), format="%(message)s")
    if service:
        structlog.contextvars.bind_contextvars(service=service, version=__version__)


logger = structlog.get_logger("stackprobe")
