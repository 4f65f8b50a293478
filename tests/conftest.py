"""
Shared test fixtures.

Provides:
- FakeClock / FakeKVStore: dict-backed key-value store with controllable time
- mock_http: factory building an httpx.AsyncClient served by a route table
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
import pytest

from weather_gateway.cache.request_cache import NO_TTL


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeKVStore:
    """
    Minimal in-memory KVStore. Set `error` to make every call raise it.
    """

    def __init__(self, clock: FakeClock) -> None:
        self._clock = clock
        self.data: dict[str, bytes] = {}
        self.expiry: dict[str, float] = {}
        self.error: Optional[Exception] = None
        self.closed = False

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    def _evict_expired(self, key: str) -> None:
        expires_at = self.expiry.get(key)
        if expires_at is not None and expires_at <= self._clock():
            self.data.pop(key, None)
            self.expiry.pop(key, None)

    async def get(self, key: str) -> Optional[bytes]:
        self._check()
        self._evict_expired(key)
        return self.data.get(key)

    async def set(self, key: str, value: bytes, ttl: float) -> None:
        self._check()
        self.data[key] = value
        if ttl > 0:
            self.expiry[key] = self._clock() + ttl
        else:
            self.expiry.pop(key, None)

    async def delete(self, key: str) -> None:
        self._check()
        self.data.pop(key, None)
        self.expiry.pop(key, None)

    async def exists(self, key: str) -> bool:
        self._check()
        self._evict_expired(key)
        return key in self.data

    async def set_nx(self, key: str, value: bytes, ttl: float) -> bool:
        self._check()
        self._evict_expired(key)
        if key in self.data:
            return False
        await self.set(key, value, ttl)
        return True

    async def delete_if_value(self, key: str, value: bytes) -> bool:
        self._check()
        self._evict_expired(key)
        if self.data.get(key) != value:
            return False
        await self.delete(key)
        return True

    async def get_ttl(self, key: str) -> float:
        self._check()
        self._evict_expired(key)
        if key not in self.expiry:
            return NO_TTL
        return self.expiry[key] - self._clock()

    async def clear(self) -> None:
        self._check()
        self.data.clear()
        self.expiry.clear()

    async def close(self) -> None:
        self._check()
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv_store(clock: FakeClock) -> FakeKVStore:
    return FakeKVStore(clock)


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


@pytest.fixture
def mock_http():
    """
    Build an httpx.AsyncClient whose requests are answered by `routes`.

    `routes` maps a path prefix to either a payload (served as JSON with 200)
    or a callable taking the request and returning an httpx.Response.
    Every request is recorded on `client.requests`.
    """

    def factory(routes: dict[str, Any]) -> httpx.AsyncClient:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            # Longest prefix wins so "/stations/X/observations" beats "/stations"
            for prefix in sorted(routes, key=len, reverse=True):
                if request.url.path.startswith(prefix):
                    route = routes[prefix]
                    if callable(route):
                        return route(request)
                    return json_response(route)
            return httpx.Response(404, text="not found")

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client.requests = requests
        return client

    return factory
