"""Process entry point: gate on the backing stores, then serve HTTP."""
from __future__ import annotations

import asyncio
import sys
from typing import Optional

import uvicorn

from .app import close_clients, create_app
from .cache import CacheClient, create_cache_client
from .config import Settings, get_settings
from .database import DatabaseClient, create_database_client
from .errors import DependencyUnavailable
from .logging_config import logger, setup_logging
from .readiness import ReadinessState, Sleep, wait_until_ready


async def serve(
    settings: Optional[Settings] = None,
    *,
    database: Optional[DatabaseClient] = None,
    cache: Optional[CacheClient] = None,
    sleep: Sleep = asyncio.sleep,
) -> int:
    """Run the service until shutdown and return the process exit code."""
    settings = settings or get_settings()
    database = database or create_database_client(settings)
    cache = cache or create_cache_client(settings)
    readiness = ReadinessState()

    try:
        await wait_until_ready(
            database,
            cache,
            max_attempts=settings.readiness_max_attempts,
            delay=settings.readiness_delay_seconds,
            sleep=sleep,
            readiness=readiness,
        )
    except DependencyUnavailable as exc:
        logger.error("dependencies.unavailable", reason=str(exc), cause=str(exc.__cause__))
        await close_clients(database, cache)
        return 1

    app = create_app(settings, database=database, cache=cache, readiness=readiness)
    config = uvicorn.Config(app, host=settings.host, port=settings.port, log_config=None)
    await uvicorn.Server(config).serve()
    return 0


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, service=settings.app_name)
    sys.exit(asyncio.run(serve(settings)))
