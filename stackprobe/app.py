"""Application factory wiring the shared clients into the routers."""
from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, Optional

import structlog
from fastapi import FastAPI, Request, Response

from . import __version__
from .cache import CacheClient, create_cache_client
from .config import Settings, get_settings
from .database import DatabaseClient, create_database_client
from .logging_config import logger
from .readiness import ReadinessState
from .routes import health, status, users


async def close_clients(database: DatabaseClient, cache: CacheClient) -> None:
    try:
        await database.dispose()
    finally:
        await cache.close()


def create_app(
    settings: Optional[Settings] = None,
    *,
    database: Optional[DatabaseClient] = None,
    cache: Optional[CacheClient] = None,
    readiness: Optional[ReadinessState] = None,
) -> FastAPI:
    settings = settings or get_settings()
    database = database or create_database_client(settings)
    cache = cache or create_cache_client(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("app.start", name=settings.app_name, port=settings.port)
        yield
        await close_clients(app.state.database, app.state.cache)
        logger.info("app.stop")

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.cache = cache
    app.state.readiness = readiness or ReadinessState()

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        with structlog.contextvars.bound_contextvars(method=request.method, path=request.url.path):
            return await call_next(request)

    app.include_router(status.router)
    app.include_router(health.router)
    app.include_router(users.router)
    return app
