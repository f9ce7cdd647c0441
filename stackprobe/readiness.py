"""Startup gate that waits for PostgreSQL and Redis to accept connections."""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from .cache import CacheClient
from .database import DatabaseClient
from .errors import DependencyUnavailable
from .logging_config import logger

Sleep = Callable[[float], Awaitable[None]]


class ReadinessState:
    """Flips from not-ready to ready once per process."""

    def __init__(self) -> None:
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    def mark_ready(self) -> None:
        self._ready = True


async def check_dependencies(database: DatabaseClient, cache: CacheClient) -> None:
    async with database.lease():
        pass
    await cache.ping()


async def wait_until_ready(
    database: DatabaseClient,
    cache: CacheClient,
    *,
    max_attempts: int,
    delay: float,
    sleep: Sleep = asyncio.sleep,
    readiness: Optional[ReadinessState] = None,
) -> int:
    """Return the attempt number on which both stores answered.

    Raises DependencyUnavailable once ``max_attempts`` checks have failed.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    last_error: Exception | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            await check_dependencies(database, cache)
        except Exception as exc:
            last_error = exc
            if attempt == 1:
                logger.info("dependencies.waiting", reason=str(exc), max_attempts=max_attempts)
            if attempt < max_attempts:
                await sleep(delay)
            continue
        if readiness is not None:
            readiness.mark_ready()
        logger.info("dependencies.ready", attempts=attempt)
        return attempt
    raise DependencyUnavailable(
        f"could not reach postgres and redis after {max_attempts} attempts"
    ) from last_error
