"""Capability contracts shared by all weather and geocoding providers."""

from abc import ABC, abstractmethod
from typing import List

from weather_gateway.providers.models import Forecast, Place, WeatherAlert


class WeatherProvider(ABC):
    """A source of current conditions, forecasts and alerts."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name, e.g. "NWS"."""

    @abstractmethod
    def supported_regions(self) -> List[str]:
        """Country codes this provider covers."""

    @abstractmethod
    async def get_current_weather(self, lat: float, lon: float) -> Forecast:
        """Current conditions for a location."""

    @abstractmethod
    async def get_forecast(self, lat: float, lon: float, days: int) -> List[Forecast]:
        """Forecast periods for a location, bounded by `days`."""

    @abstractmethod
    async def get_alerts(self, lat: float, lon: float) -> List[WeatherAlert]:
        """Active alerts for a location."""

    async def aclose(self):
        """Release any held resources."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


class GeocodeProvider(ABC):
    """A source of forward and reverse geocoding."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name, e.g. "Census"."""

    @abstractmethod
    def supported_regions(self) -> List[str]:
        """Country codes this provider covers."""

    @abstractmethod
    async def geocode_address(self, address: str) -> List[Place]:
        """Candidate places for a free-text address, in upstream order."""

    @abstractmethod
    async def reverse_geocode(self, lat: float, lon: float) -> Place:
        """The best-matching place for a coordinate."""

    async def aclose(self):
        """Release any held resources."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
