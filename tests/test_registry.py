"""
Tests for ProviderRegistry.
"""

from __future__ import annotations

from typing import List

import pytest

from weather_gateway.providers.base import GeocodeProvider, WeatherProvider
from weather_gateway.providers.models import Forecast, Place, WeatherAlert
from weather_gateway.providers.registry import ProviderRegistry


class StubWeatherProvider(WeatherProvider):
    def __init__(self, name: str) -> None:
        self._name = name
        self.closed = False

    @property
    def name(self) -> str:
        return self._name

    def supported_regions(self) -> List[str]:
        return ["US"]

    async def get_current_weather(self, lat: float, lon: float) -> Forecast:
        raise NotImplementedError

    async def get_forecast(self, lat: float, lon: float, days: int) -> List[Forecast]:
        raise NotImplementedError

    async def get_alerts(self, lat: float, lon: float) -> List[WeatherAlert]:
        raise NotImplementedError

    async def aclose(self):
        self.closed = True


class StubGeocodeProvider(GeocodeProvider):
    def __init__(self, name: str) -> None:
        self._name = name
        self.closed = False

    @property
    def name(self) -> str:
        return self._name

    def supported_regions(self) -> List[str]:
        return ["US"]

    async def geocode_address(self, address: str) -> List[Place]:
        raise NotImplementedError

    async def reverse_geocode(self, lat: float, lon: float) -> Place:
        raise NotImplementedError

    async def aclose(self):
        self.closed = True


class TestWeatherProviders:
    def test_empty_registry(self):
        registry = ProviderRegistry()
        assert registry.weather_providers() == []
        assert registry.get_weather_provider("NWS") is None

    def test_lists_in_registration_order(self):
        registry = ProviderRegistry()
        first, second = StubWeatherProvider("NWS"), StubWeatherProvider("Other")
        registry.register_weather_provider(first)
        registry.register_weather_provider(second)

        assert registry.weather_providers() == [first, second]

    def test_listing_is_a_copy(self):
        registry = ProviderRegistry()
        registry.register_weather_provider(StubWeatherProvider("NWS"))

        registry.weather_providers().clear()

        assert len(registry.weather_providers()) == 1

    def test_lookup_is_exact_and_case_sensitive(self):
        registry = ProviderRegistry()
        nws = StubWeatherProvider("NWS")
        registry.register_weather_provider(nws)

        assert registry.get_weather_provider("NWS") is nws
        assert registry.get_weather_provider("nws") is None

    def test_duplicate_names_resolve_to_first(self):
        registry = ProviderRegistry()
        first, second = StubWeatherProvider("NWS"), StubWeatherProvider("NWS")
        registry.register_weather_provider(first)
        registry.register_weather_provider(second)

        assert registry.get_weather_provider("NWS") is first
        assert len(registry.weather_providers()) == 2


class TestGeocodeProviders:
    def test_register_and_lookup(self):
        registry = ProviderRegistry()
        census = StubGeocodeProvider("Census")
        registry.register_geocode_provider(census)

        assert registry.geocode_providers() == [census]
        assert registry.get_geocode_provider("Census") is census
        assert registry.get_geocode_provider("census") is None

    def test_capabilities_are_separate(self):
        registry = ProviderRegistry()
        registry.register_weather_provider(StubWeatherProvider("Shared"))

        assert registry.get_geocode_provider("Shared") is None
        assert registry.geocode_providers() == []


@pytest.mark.asyncio
async def test_aclose_closes_every_provider():
    registry = ProviderRegistry()
    weather, geocode = StubWeatherProvider("NWS"), StubGeocodeProvider("Census")
    registry.register_weather_provider(weather)
    registry.register_geocode_provider(geocode)

    await registry.aclose()

    assert weather.closed
    assert geocode.closed
