"""Redis cache backend using redis.asyncio."""

import json
from typing import Any

import redis.asyncio as redis

from recordstore.config import get_logger

logger = get_logger(__name__)


class RedisCache:
    """Shared cache on a Redis server.

    Keys expire server-side through SETEX. Prefix deletes walk the keyspace
    with SCAN so they never block the server.
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None) -> None:
        if client is None and url is None:
            raise ValueError("RedisCache needs a url or a client")
        self._client = client or redis.from_url(url, decode_responses=True)

    async def get(self, key: str) -> Any | None:
        payload = await self._client.get(key)
        if payload is None:
            return None
        return json.loads(payload)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        await self._client.setex(key, ttl, json.dumps(value))

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def delete_prefix(self, prefix: str) -> int:
        keys = [key async for key in self._client.scan_iter(match=f"{prefix}*", count=500)]
        if not keys:
            return 0
        deleted = await self._client.delete(*keys)
        logger.debug(f"Invalidated {deleted} cache keys", prefix=prefix)
        return deleted

    async def clear(self) -> None:
        await self._client.flushdb()

    async def close(self) -> None:
        await self._client.aclose()
