"""National Weather Service (api.weather.gov) weather provider."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from weather_gateway.config import HTTP_TIMEOUT_SECONDS, NWS_BASE_URL, USER_AGENT
from weather_gateway.providers.base import WeatherProvider
from weather_gateway.providers.client import JSONClient
from weather_gateway.providers.errors import DecodeError, NoResultsError, ProviderError, wrap_error
from weather_gateway.providers.models import Forecast, WeatherAlert
from weather_gateway.providers.schemas import (
    NWSAlertFeature, NWSForecastPeriod, NWSObservationResponse,
    NWSPointResponse, NWSQuantitativeValue, NWSStationsResponse
)
from weather_gateway.providers.units import (
    compass_to_degrees, fahrenheit_to_celsius, meters_to_km,
    pa_to_hpa, parse_rfc3339, parse_wind_speed
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class NWSProvider(WeatherProvider):
    """Weather provider for the US National Weather Service API.

    NWS addresses forecasts by grid point rather than by coordinate, so every
    operation that needs a forecast or observation first resolves the
    coordinate through the points endpoint.
    """

    def __init__(
        self,
        base_url: str = NWS_BASE_URL,
        user_agent: str = USER_AGENT,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the NWS provider.

        Args:
            base_url: Base URL for the NWS API
            user_agent: User-Agent header; NWS requires one with contact info
            timeout: Request timeout in seconds
            client: Preconfigured httpx client (creates one if None)
        """
        self.base_url = base_url.rstrip("/")
        self.http = JSONClient(user_agent=user_agent, timeout=timeout, client=client)

    @property
    def name(self) -> str:
        return "NWS"

    def supported_regions(self) -> List[str]:
        return ["US"]

    async def get_current_weather(self, lat: float, lon: float) -> Forecast:
        """Get the latest observation near a coordinate.

        Uses the first observation station listed for the grid point.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            Forecast built from the latest observation

        Raises:
            ProviderError: If any upstream stage fails
            NoResultsError: If the grid point has no observation stations
        """
        point = await self._get_grid_point(lat, lon)
        props = point.properties

        stations_url = props.observation_stations or (
            f"{self.base_url}/gridpoints/{props.grid_id}/{props.grid_x},{props.grid_y}/stations"
        )
        try:
            data = await self.http.get_json(stations_url)
            stations = _parse(NWSStationsResponse, data, "stations")
        except ProviderError as e:
            raise wrap_error("failed to get observation stations", e) from e

        if not stations.features:
            raise NoResultsError("no observation stations found")

        station_id = stations.features[0].properties.station_identifier
        logger.info(f"Fetching latest observation from station {station_id}")

        try:
            data = await self.http.get_json(f"{self.base_url}/stations/{station_id}/observations/latest")
            observation = _parse(NWSObservationResponse, data, "observation")
        except ProviderError as e:
            raise wrap_error("failed to get current observation", e) from e

        return self._observation_to_forecast(observation)

    async def get_forecast(self, lat: float, lon: float, days: int) -> List[Forecast]:
        """Get forecast periods for a coordinate.

        NWS returns day and night periods, so `days` maps to twice as many
        periods. Periods that fail to convert are skipped.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees
            days: Number of days requested

        Returns:
            List of forecasts, at most `days * 2`
        """
        point = await self._get_grid_point(lat, lon)

        try:
            data = await self.http.get_json(point.properties.forecast)
            properties = data.get("properties")
            periods = properties.get("periods") if isinstance(properties, dict) else None
            if not isinstance(periods, list):
                raise DecodeError("failed to parse forecast response: missing periods")
        except ProviderError as e:
            raise wrap_error("failed to get forecast", e) from e

        max_periods = min(max(days, 0) * 2, len(periods))
        forecasts = []
        for raw_period in periods[:max_periods]:
            try:
                period = NWSForecastPeriod.model_validate(raw_period)
                forecasts.append(self._period_to_forecast(period))
            except (ValidationError, ValueError) as e:
                logger.warning(f"Skipping invalid forecast period: {e}")
                continue

        logger.info(f"Converted {len(forecasts)} of {max_periods} forecast periods")
        return forecasts

    async def get_alerts(self, lat: float, lon: float) -> List[WeatherAlert]:
        """Get active alerts for a coordinate.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            List of alerts; features that fail to convert are skipped
        """
        try:
            data = await self.http.get_json(
                f"{self.base_url}/alerts/active", params={"point": f"{lat:.4f},{lon:.4f}"}
            )
            features = data.get("features")
            if not isinstance(features, list):
                raise DecodeError("failed to parse alerts response: missing features")
        except ProviderError as e:
            raise wrap_error("failed to get alerts", e) from e

        alerts = []
        for raw_feature in features:
            try:
                feature = NWSAlertFeature.model_validate(raw_feature)
                alerts.append(self._feature_to_alert(feature))
            except (ValidationError, ValueError) as e:
                logger.warning(f"Skipping invalid alert: {e}")
                continue

        return alerts

    async def _get_grid_point(self, lat: float, lon: float) -> NWSPointResponse:
        try:
            data = await self.http.get_json(f"{self.base_url}/points/{lat:.4f},{lon:.4f}")
            return _parse(NWSPointResponse, data, "point")
        except ProviderError as e:
            raise wrap_error("failed to get grid point", e) from e

    def _observation_to_forecast(self, observation: NWSObservationResponse) -> Forecast:
        props = observation.properties

        if props.timestamp:
            try:
                timestamp = parse_rfc3339(props.timestamp)
            except ValueError as e:
                raise DecodeError(f"failed to parse timestamp: {e}") from e
        else:
            timestamp = datetime.now(timezone.utc)

        try:
            return Forecast(
                source_provider=self.name,
                forecast_time=timestamp,
                valid_time=timestamp,
                description=props.text_description,
                temperature=_value_or_zero(props.temperature),
                humidity=_value_or_zero(props.relative_humidity),
                pressure=pa_to_hpa(_value_or_zero(props.barometric_pressure)),
                wind_speed=_value_or_zero(props.wind_speed),
                wind_direction=_value_or_zero(props.wind_direction) % 360,
                visibility=meters_to_km(_value_or_zero(props.visibility)),
            )
        except ValidationError as e:
            raise DecodeError(f"observation out of range: {e}") from e

    def _period_to_forecast(self, period: NWSForecastPeriod) -> Forecast:
        start_time = parse_rfc3339(period.start_time)
        parse_rfc3339(period.end_time)

        if period.temperature_unit == "F":
            temperature = fahrenheit_to_celsius(period.temperature)
        else:
            temperature = float(period.temperature)

        return Forecast(
            source_provider=self.name,
            forecast_time=datetime.now(timezone.utc),
            valid_time=start_time,
            temperature=temperature,
            wind_speed=parse_wind_speed(period.wind_speed),
            wind_direction=compass_to_degrees(period.wind_direction),
            weather_code=period.short_forecast,
            description=period.detailed_forecast,
        )

    def _feature_to_alert(self, feature: NWSAlertFeature) -> WeatherAlert:
        props = feature.properties
        return WeatherAlert(
            id=props.id,
            title=props.event,
            description=props.description,
            severity=props.severity,
            urgency=props.urgency,
            category=props.category,
            start_time=_parse_optional_time(props.onset),
            end_time=_parse_optional_time(props.expires),
            areas=[area.strip() for area in props.area_desc.split(";") if area.strip()],
        )

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self.http.aclose()


def _parse(model: Type[ModelT], data: Dict[str, Any], what: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"failed to parse {what} response: {e}") from e


def _value_or_zero(quantity: NWSQuantitativeValue) -> float:
    return quantity.value if quantity.value is not None else 0.0


def _parse_optional_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return parse_rfc3339(value)
    except ValueError:
        return None
