"""Cache-aside read path over the provider registry."""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union

from pydantic import TypeAdapter, ValidationError
from redis.exceptions import RedisError

from weather_gateway.cache.request_cache import NO_TTL, RequestCache
from weather_gateway.config import (
    ALERTS_TTL_SECONDS, CURRENT_WEATHER_TTL_SECONDS, FILL_LOCK_TTL_SECONDS,
    FILL_WAIT_ATTEMPTS, FILL_WAIT_INTERVAL_SECONDS, FORECAST_TTL_SECONDS,
    GEOCODE_TTL_SECONDS
)
from weather_gateway.providers.base import GeocodeProvider, WeatherProvider
from weather_gateway.providers.errors import ProviderError, ProviderNotFoundError
from weather_gateway.providers.models import Forecast, Place, ProviderResponse, WeatherAlert
from weather_gateway.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)

Provider = Union[WeatherProvider, GeocodeProvider]

FORECAST_ADAPTER = TypeAdapter(Forecast)
FORECAST_LIST_ADAPTER = TypeAdapter(List[Forecast])
ALERT_LIST_ADAPTER = TypeAdapter(List[WeatherAlert])
PLACE_ADAPTER = TypeAdapter(Place)
PLACE_LIST_ADAPTER = TypeAdapter(List[Place])


def _coordinate_key(lat: float, lon: float) -> str:
    return f"{lat:.4f}:{lon:.4f}"


def _address_key(address: str) -> str:
    return " ".join(address.lower().split())


class GatewayService:
    """Serves canonical weather and geocoding records, cache first.

    On a miss the service asks a provider, wraps the result in a
    ProviderResponse and writes it back with a TTL matched to how quickly the
    data goes stale. Concurrent misses on the same key are collapsed with a
    short-lived fill lock taken through set_nx.

    A failing cache never fails a request: cache errors are logged and the
    provider is called directly.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        cache: Optional[RequestCache] = None,
        current_ttl: float = CURRENT_WEATHER_TTL_SECONDS,
        forecast_ttl: float = FORECAST_TTL_SECONDS,
        alerts_ttl: float = ALERTS_TTL_SECONDS,
        geocode_ttl: float = GEOCODE_TTL_SECONDS,
        fill_lock_ttl: float = FILL_LOCK_TTL_SECONDS,
        fill_wait_attempts: int = FILL_WAIT_ATTEMPTS,
        fill_wait_interval: float = FILL_WAIT_INTERVAL_SECONDS
    ):
        """Initialize the service.

        Args:
            registry: Providers to serve from
            cache: Cache to read through; None disables caching
            current_ttl: TTL for current conditions, in seconds
            forecast_ttl: TTL for forecasts, in seconds
            alerts_ttl: TTL for alerts, in seconds
            geocode_ttl: TTL for geocoding results, in seconds
            fill_lock_ttl: Lifetime of a fill lock, in seconds
            fill_wait_attempts: How often to re-check the cache while another fill runs
            fill_wait_interval: Pause between those checks, in seconds
        """
        self.registry = registry
        self.cache = cache
        self.current_ttl = current_ttl
        self.forecast_ttl = forecast_ttl
        self.alerts_ttl = alerts_ttl
        self.geocode_ttl = geocode_ttl
        self.fill_lock_ttl = fill_lock_ttl
        self.fill_wait_attempts = fill_wait_attempts
        self.fill_wait_interval = fill_wait_interval

    async def current_weather(self, lat: float, lon: float, provider: Optional[str] = None) -> ProviderResponse:
        """Current conditions; `data` is a Forecast."""
        return await self._serve(
            self._weather_providers(provider),
            key=lambda name: f"weather:current:{name}:{_coordinate_key(lat, lon)}",
            ttl=self.current_ttl,
            fetch=lambda p: p.get_current_weather(lat, lon),
            adapter=FORECAST_ADAPTER,
        )

    async def forecast(self, lat: float, lon: float, days: int, provider: Optional[str] = None) -> ProviderResponse:
        """Forecast periods; `data` is a list of Forecast."""
        return await self._serve(
            self._weather_providers(provider),
            key=lambda name: f"weather:forecast:{name}:{_coordinate_key(lat, lon)}:{days}",
            ttl=self.forecast_ttl,
            fetch=lambda p: p.get_forecast(lat, lon, days),
            adapter=FORECAST_LIST_ADAPTER,
        )

    async def alerts(self, lat: float, lon: float, provider: Optional[str] = None) -> ProviderResponse:
        """Active alerts; `data` is a list of WeatherAlert."""
        return await self._serve(
            self._weather_providers(provider),
            key=lambda name: f"weather:alerts:{name}:{_coordinate_key(lat, lon)}",
            ttl=self.alerts_ttl,
            fetch=lambda p: p.get_alerts(lat, lon),
            adapter=ALERT_LIST_ADAPTER,
        )

    async def geocode(self, address: str, provider: Optional[str] = None) -> ProviderResponse:
        """Forward geocoding; `data` is a list of Place."""
        return await self._serve(
            self._geocode_providers(provider),
            key=lambda name: f"geocode:forward:{name}:{_address_key(address)}",
            ttl=self.geocode_ttl,
            fetch=lambda p: p.geocode_address(address),
            adapter=PLACE_LIST_ADAPTER,
        )

    async def reverse_geocode(self, lat: float, lon: float, provider: Optional[str] = None) -> ProviderResponse:
        """Reverse geocoding; `data` is a Place."""
        return await self._serve(
            self._geocode_providers(provider),
            key=lambda name: f"geocode:reverse:{name}:{_coordinate_key(lat, lon)}",
            ttl=self.geocode_ttl,
            fetch=lambda p: p.reverse_geocode(lat, lon),
            adapter=PLACE_ADAPTER,
        )

    def _weather_providers(self, name: Optional[str]) -> List[WeatherProvider]:
        if name is not None:
            provider = self.registry.get_weather_provider(name)
            if provider is None:
                raise ProviderNotFoundError(f"weather provider not found: {name}")
            return [provider]

        providers = self.registry.weather_providers()
        if not providers:
            raise ProviderNotFoundError("no weather providers registered")
        return providers

    def _geocode_providers(self, name: Optional[str]) -> List[GeocodeProvider]:
        if name is not None:
            provider = self.registry.get_geocode_provider(name)
            if provider is None:
                raise ProviderNotFoundError(f"geocode provider not found: {name}")
            return [provider]

        providers = self.registry.geocode_providers()
        if not providers:
            raise ProviderNotFoundError("no geocode providers registered")
        return providers

    async def _serve(
        self,
        providers: Sequence[Provider],
        key: Callable[[str], str],
        ttl: float,
        fetch: Callable[[Any], Awaitable[Any]],
        adapter: TypeAdapter
    ) -> ProviderResponse:
        """Try each provider in turn, falling back on provider errors.

        Raises:
            ProviderError: The last provider's error if every provider failed
        """
        last_error: Optional[ProviderError] = None
        for provider in providers:
            try:
                return await self._read_through(provider, key(provider.name), ttl, fetch, adapter)
            except ProviderError as e:
                logger.warning(f"Provider {provider.name} failed: {e}")
                last_error = e
                continue

        raise last_error

    async def _read_through(
        self,
        provider: Provider,
        key: str,
        ttl: float,
        fetch: Callable[[Any], Awaitable[Any]],
        adapter: TypeAdapter
    ) -> ProviderResponse:
        cached = await self._cache_get(key, adapter)
        if cached is not None:
            return cached

        if self.cache is None:
            return await self._fetch(provider, fetch, ttl)

        lock_key = f"lock:{key}"
        token = uuid.uuid4().hex.encode("ascii")
        taken = await self._acquire_fill_lock(lock_key, token)
        if taken is False:
            cached = await self._wait_for_fill(key, adapter)
            if cached is not None:
                return cached
            logger.info(f"Fill for {key} did not finish in time, fetching directly")

        try:
            response = await self._fetch(provider, fetch, ttl)
            await self._cache_set(key, response, ttl)
            return response
        finally:
            if taken:
                await self._release_fill_lock(lock_key, token)

    async def _fetch(self, provider: Provider, fetch: Callable[[Any], Awaitable[Any]], ttl: float) -> ProviderResponse:
        logger.info(f"Fetching from provider {provider.name}")
        data = await fetch(provider)
        return ProviderResponse(
            provider=provider.name,
            timestamp=datetime.now(timezone.utc),
            data=data,
            cached=False,
            ttl=ttl,
        )

    async def _wait_for_fill(self, key: str, adapter: TypeAdapter) -> Optional[ProviderResponse]:
        for _ in range(self.fill_wait_attempts):
            await asyncio.sleep(self.fill_wait_interval)
            cached = await self._cache_get(key, adapter)
            if cached is not None:
                return cached
        return None

    async def _cache_get(self, key: str, adapter: TypeAdapter) -> Optional[ProviderResponse]:
        """Read and decode a cached envelope.

        On a hit, `ttl` is replaced by the entry's remaining lifetime when the
        cache can report it.
        """
        if self.cache is None:
            return None

        try:
            raw = await self.cache.get(key)
        except RedisError as e:
            logger.warning(f"Cache GET failed for key={key}, falling back to provider: {e}")
            return None

        if raw is None:
            logger.debug(f"Cache miss: {key}")
            return None

        try:
            envelope = ProviderResponse.model_validate_json(raw)
            data = adapter.validate_python(envelope.data)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            return None

        logger.debug(f"Cache hit: {key}")
        update = {"data": data, "cached": True}
        remaining = await self._remaining_ttl(key)
        if remaining > 0:
            update["ttl"] = remaining
        return envelope.model_copy(update=update)

    async def _remaining_ttl(self, key: str) -> float:
        try:
            return await self.cache.get_ttl(key)
        except RedisError as e:
            logger.warning(f"Cache TTL lookup failed for key={key}: {e}")
            return NO_TTL

    async def _cache_set(self, key: str, response: ProviderResponse, ttl: float) -> None:
        try:
            await self.cache.set(key, response.model_dump_json().encode("utf-8"), ttl)
            logger.debug(f"Cached {key} ttl={ttl}s")
        except RedisError as e:
            logger.warning(f"Cache SET failed for key={key}: {e}")

    async def _acquire_fill_lock(self, lock_key: str, token: bytes) -> Optional[bool]:
        """Try to take the fill lock for a key.

        Returns:
            True if this request holds the lock, False if another fill holds
            it, None if the cache could not be asked
        """
        try:
            return await self.cache.set_nx(lock_key, token, self.fill_lock_ttl)
        except RedisError as e:
            logger.warning(f"Could not take fill lock {lock_key}: {e}")
            return None

    async def _release_fill_lock(self, lock_key: str, token: bytes) -> None:
        try:
            released = await self.cache.delete_if_value(lock_key, token)
        except RedisError as e:
            logger.warning(f"Could not release fill lock {lock_key}: {e}")
            return

        if not released:
            logger.info(f"Fill lock {lock_key} expired before the fill finished")
