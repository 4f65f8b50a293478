"""Namespaced cache-aside layer over a key-value store."""

from typing import Optional, Protocol

# Returned by get_ttl when a key is missing or never expires
NO_TTL = -1.0


class KVStore(Protocol):
    """Byte-oriented key-value store with expiry.

    TTLs are in seconds; a TTL of zero or less stores the value without expiry.
    """

    async def get(self, key: str) -> Optional[bytes]: ...

    async def set(self, key: str, value: bytes, ttl: float) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def exists(self, key: str) -> bool: ...

    async def set_nx(self, key: str, value: bytes, ttl: float) -> bool: ...

    async def delete_if_value(self, key: str, value: bytes) -> bool: ...

    async def get_ttl(self, key: str) -> float: ...

    async def clear(self) -> None: ...

    async def close(self) -> None: ...


class RequestCache:
    """Prefixes every key with a namespace and forwards to the store.

    Errors from the store are propagated unchanged. Retry and fallback
    policy belongs to the caller.
    """

    def __init__(self, store: KVStore, prefix: str = ""):
        """Initialize the cache.

        Args:
            store: Underlying key-value store; its lifecycle is owned by the caller
            prefix: Namespace prepended as "<prefix>:<key>"; empty for bare keys
        """
        self.store = store
        self.prefix = prefix

    def prefix_key(self, key: str) -> str:
        if not self.prefix:
            return key
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Optional[bytes]:
        """Return the cached bytes, or None on a miss."""
        return await self.store.get(self.prefix_key(key))

    async def set(self, key: str, value: bytes, ttl: float) -> None:
        await self.store.set(self.prefix_key(key), value, ttl)

    async def delete(self, key: str) -> None:
        await self.store.delete(self.prefix_key(key))

    async def exists(self, key: str) -> bool:
        return await self.store.exists(self.prefix_key(key))

    async def set_nx(self, key: str, value: bytes, ttl: float) -> bool:
        """Store the value only if the key is absent. Returns True if stored."""
        return await self.store.set_nx(self.prefix_key(key), value, ttl)

    async def delete_if_value(self, key: str, value: bytes) -> bool:
        """Delete the key only while it still holds `value`. Returns True if deleted."""
        return await self.store.delete_if_value(self.prefix_key(key), value)

    async def get_ttl(self, key: str) -> float:
        """Remaining TTL in seconds, or NO_TTL."""
        return await self.store.get_ttl(self.prefix_key(key))

    async def clear(self) -> None:
        """Remove every key in the underlying store, not just this namespace."""
        await self.store.clear()

    async def close(self) -> None:
        await self.store.close()
