"""Redis access for the last-call marker and liveness pings."""
from __future__ import annotations

from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from .config import Settings
from .errors import CacheError, describe


class CacheClient:
    def __init__(self, redis: Redis) -> None:
        self._redis = redis

    async def set(self, key: str, value: Any) -> None:
        try:
            await self._redis.set(key, value)
        except (RedisError, OSError) as exc:
            raise CacheError(describe(exc)) from exc

    async def ping(self) -> None:
        try:
            pong = await self._redis.ping()
        except (RedisError, OSError) as exc:
            raise CacheError(describe(exc)) from exc
        if not pong:
            raise CacheError("cache did not answer ping")

    async def close(self) -> None:
        await self._redis.aclose()


def create_cache_client(settings: Settings) -> CacheClient:
    redis = Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
    return CacheClient(redis)
