"""Pooled PostgreSQL access with per-request connection leases."""
from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Dict, List

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from .config import Settings
from .errors import DatabaseConnectionError, QueryError, describe


class Lease:
    """One pooled connection, borrowed for a single request."""

    def __init__(self, connection: AsyncConnection) -> None:
        self._connection = connection
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    async def query(self, sql: str) -> List[Dict[str, Any]]:
        if self._released:
            raise QueryError("lease already released")
        try:
            result = await self._connection.execute(text(sql))
        except SQLAlchemyError as exc:
            raise QueryError(describe(exc)) from exc
        return [dict(row) for row in result.mappings().all()]

    async def release(self) -> None:
        if self._released:
            return
        self._released = True
        await self._connection.close()


class DatabaseClient:
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def acquire(self) -> Lease:
        try:
            connection = await self._engine.connect()
        except (SQLAlchemyError, OSError) as exc:
            raise DatabaseConnectionError(describe(exc)) from exc
        return Lease(connection)

    @asynccontextmanager
    async def lease(self) -> AsyncIterator[Lease]:
        lease = await self.acquire()
        try:
            yield lease
        finally:
            await lease.release()

    async def dispose(self) -> None:
        await self._engine.dispose()


def create_database_client(settings: Settings) -> DatabaseClient:
    engine = create_async_engine(
        settings.database_url,
        echo=False,
        pool_size=settings.db_pool_size,
        pool_pre_ping=True,
    )
    return DatabaseClient(engine)
