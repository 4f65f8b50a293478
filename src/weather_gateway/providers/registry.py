"""Registry of named weather and geocode providers."""

import logging
from typing import List, Optional

from weather_gateway.providers.base import GeocodeProvider, WeatherProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Holds provider instances by capability.

    Built once at startup and passed to whoever needs it. Registration keeps
    duplicates; lookup by name returns the first provider registered under
    that name.
    """

    def __init__(self):
        self._weather_providers: List[WeatherProvider] = []
        self._geocode_providers: List[GeocodeProvider] = []

    def register_weather_provider(self, provider: WeatherProvider) -> None:
        self._weather_providers.append(provider)
        logger.info(f"Registered weather provider {provider.name}")

    def register_geocode_provider(self, provider: GeocodeProvider) -> None:
        self._geocode_providers.append(provider)
        logger.info(f"Registered geocode provider {provider.name}")

    def weather_providers(self) -> List[WeatherProvider]:
        """All weather providers, in registration order."""
        return list(self._weather_providers)

    def geocode_providers(self) -> List[GeocodeProvider]:
        """All geocode providers, in registration order."""
        return list(self._geocode_providers)

    def get_weather_provider(self, name: str) -> Optional[WeatherProvider]:
        """Find a weather provider by exact, case-sensitive name."""
        for provider in self._weather_providers:
            if provider.name == name:
                return provider
        return None

    def get_geocode_provider(self, name: str) -> Optional[GeocodeProvider]:
        """Find a geocode provider by exact, case-sensitive name."""
        for provider in self._geocode_providers:
            if provider.name == name:
                return provider
        return None

    async def aclose(self):
        """Close every registered provider."""
        for provider in [*self._weather_providers, *self._geocode_providers]:
            await provider.aclose()
