"""In-process cache backend.

Values are stored JSON-encoded so callers get the same detached copies they
would get from Redis. Expiry is checked lazily on read.
"""

import asyncio
import json
import time
from typing import Any

from recordstore.config import get_logger

logger = get_logger(__name__)


class InMemoryCache:
    """Dictionary cache with per-key TTL, safe for concurrent tasks."""

    def __init__(self, clock=time.monotonic) -> None:
        self._entries: dict[str, tuple[float, str]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, payload = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
        return json.loads(payload)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        payload = json.dumps(value)
        async with self._lock:
            self._entries[key] = (self._clock() + ttl, payload)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def delete_prefix(self, prefix: str) -> int:
        async with self._lock:
            doomed = [key for key in self._entries if key.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
        logger.debug(f"Invalidated {len(doomed)} cache keys", prefix=prefix)
        return len(doomed)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    async def close(self) -> None:
        await self.clear()

    def __len__(self) -> int:
        return len(self._entries)
