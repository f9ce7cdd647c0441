from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from stackprobe.app import create_app
from stackprobe.cache import CacheClient
from stackprobe.config import Settings
from stackprobe.database import DatabaseClient
from stackprobe.errors import DatabaseConnectionError, QueryError

ENV_KEYS = (
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_PASSWORD",
    "DB_NAME",
    "REDIS_HOST",
    "REDIS_PORT",
    "PORT",
    "READINESS_MAX_ATTEMPTS",
    "READINESS_DELAY_SECONDS",
)


class FakeLease:
    def __init__(self, owner: "FakeDatabase") -> None:
        self.owner = owner
        self.released = False
        self.queries: List[str] = []

    async def query(self, sql: str) -> List[Dict[str, Any]]:
        self.queries.append(sql)
        if self.owner.query_error is not None:
            raise QueryError(self.owner.query_error)
        return [dict(row) for row in self.owner.rows]

    async def release(self) -> None:
        if self.released:
            return
        self.released = True
        self.owner.released += 1


class FakeDatabase(DatabaseClient):
    """Counts leases so tests can check that every acquire is released."""

    def __init__(
        self,
        rows: Optional[List[Dict[str, Any]]] = None,
        *,
        acquire_failures: int = 0,
        acquire_error: str = "connection refused",
        query_error: Optional[str] = None,
    ) -> None:
        super().__init__(engine=None)  # type: ignore[arg-type]
        self.rows = rows if rows is not None else [{"?column?": 1}]
        self.acquire_failures = acquire_failures
        self.acquire_error = acquire_error
        self.query_error = query_error
        self.attempts = 0
        self.acquired = 0
        self.released = 0
        self.disposed = False

    async def acquire(self) -> FakeLease:  # type: ignore[override]
        self.attempts += 1
        if self.acquire_failures < 0 or self.attempts <= self.acquire_failures:
            raise DatabaseConnectionError(self.acquire_error)
        self.acquired += 1
        return FakeLease(self)

    async def dispose(self) -> None:
        self.disposed = True


class StubRedis:
    """Stands in for redis.asyncio.Redis behind the real CacheClient."""

    def __init__(self, *, ping_error: Optional[str] = None, set_error: Optional[str] = None) -> None:
        self.ping_error = ping_error
        self.set_error = set_error
        self.store: Dict[str, Any] = {}
        self.set_calls: List[tuple[str, Any]] = []
        self.pings = 0
        self.closed = False

    async def ping(self) -> bool:
        self.pings += 1
        if self.ping_error is not None:
            raise RedisConnectionError(self.ping_error)
        return True

    async def set(self, key: str, value: Any) -> bool:
        self.set_calls.append((key, value))
        if self.set_error is not None:
            raise RedisConnectionError(self.set_error)
        self.store[key] = value
        return True

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None, readiness_max_attempts=5, readiness_delay_seconds=0)


@pytest.fixture()
def database() -> FakeDatabase:
    return FakeDatabase(rows=[{"now": "2024-01-01T00:00:00Z"}])


@pytest.fixture()
def redis_stub() -> StubRedis:
    return StubRedis()


@pytest.fixture()
def cache(redis_stub: StubRedis) -> CacheClient:
    return CacheClient(redis_stub)  # type: ignore[arg-type]


@pytest.fixture()
def client(settings: Settings, database: FakeDatabase, cache: CacheClient) -> TestClient:
    return TestClient(create_app(settings, database=database, cache=cache))
