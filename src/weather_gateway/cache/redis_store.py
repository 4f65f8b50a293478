"""Redis implementation of the key-value store."""

import logging
from typing import Optional

import redis.asyncio as redis

from weather_gateway.cache.request_cache import NO_TTL
from weather_gateway.config import REDIS_URL

logger = logging.getLogger(__name__)

# Atomic compare-and-delete: DEL only while the key still holds ARGV[1]
DELETE_IF_VALUE_SCRIPT = """
if redis.call("GET", KEYS[1]) == ARGV[1] then
    return redis.call("DEL", KEYS[1])
end
return 0
"""


class RedisKVStore:
    """Key-value store backed by redis.asyncio.

    Redis errors are not caught here; they reach the caller as
    redis.RedisError subclasses.
    """

    def __init__(self, redis_client: redis.Redis):
        """Initialize the store.

        Args:
            redis_client: Async Redis client; must return raw bytes
        """
        self.redis_client = redis_client

    @classmethod
    def from_url(cls, url: str = REDIS_URL) -> "RedisKVStore":
        """Create a store connected to the given Redis URL."""
        logger.info(f"Connecting to Redis at {url}")
        return cls(redis.from_url(url))

    async def get(self, key: str) -> Optional[bytes]:
        return await self.redis_client.get(key)

    async def set(self, key: str, value: bytes, ttl: float) -> None:
        await self.redis_client.set(key, value, px=_to_millis(ttl))

    async def delete(self, key: str) -> None:
        await self.redis_client.delete(key)

    async def exists(self, key: str) -> bool:
        return await self.redis_client.exists(key) > 0

    async def set_nx(self, key: str, value: bytes, ttl: float) -> bool:
        # SET NX answers None when the key already exists
        result = await self.redis_client.set(key, value, px=_to_millis(ttl), nx=True)
        return bool(result)

    async def delete_if_value(self, key: str, value: bytes) -> bool:
        deleted = await self.redis_client.eval(DELETE_IF_VALUE_SCRIPT, 1, key, value)
        return bool(deleted)

    async def get_ttl(self, key: str) -> float:
        # PTTL: -2 when the key is missing, -1 when it has no expiry
        remaining = await self.redis_client.pttl(key)
        if remaining < 0:
            return NO_TTL
        return remaining / 1000

    async def clear(self) -> None:
        await self.redis_client.flushdb()

    async def close(self) -> None:
        await self.redis_client.aclose()


def _to_millis(ttl: float) -> Optional[int]:
    if ttl <= 0:
        return None
    return max(int(ttl * 1000), 1)
