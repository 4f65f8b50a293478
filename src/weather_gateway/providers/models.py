"""Canonical, provider-agnostic data models."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Forecast(BaseModel):
    """Weather conditions for one point in time, in SI units."""
    model_config = ConfigDict(frozen=True)

    source_provider: str = Field(..., min_length=1, description="Provider name, e.g. NWS")
    forecast_time: datetime = Field(..., description="When the forecast was issued")
    valid_time: datetime = Field(..., description="When the conditions apply")
    temperature: float = Field(0.0, ge=-273.15, description="Temperature in Celsius")
    feels_like: float = Field(0.0, ge=-273.15, description="Apparent temperature in Celsius")
    humidity: float = Field(0.0, ge=0, le=100, description="Relative humidity in percent")
    pressure: float = Field(0.0, ge=0, description="Pressure in hPa")
    wind_speed: float = Field(0.0, ge=0, description="Wind speed in m/s")
    wind_direction: float = Field(0.0, ge=0, lt=360, description="Wind direction in degrees")
    visibility: float = Field(0.0, ge=0, description="Visibility in km")
    cloud_cover: float = Field(0.0, ge=0, le=100, description="Cloud cover in percent")
    precipitation: float = Field(0.0, ge=0, description="Precipitation in mm")
    weather_code: str = Field("", description="Provider-specific condition code")
    description: str = Field("", description="Free-text description")
    uv_index: float = Field(0.0, ge=0, description="UV index")


class WeatherAlert(BaseModel):
    """An active weather alert or warning."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Provider alert identifier")
    title: str = Field("", description="Alert event name")
    description: str = Field("", description="Alert body text")
    severity: str = Field("", description="Lower-cased severity, e.g. severe")
    urgency: str = Field("", description="Lower-cased urgency, e.g. immediate")
    category: str = Field("", description="Lower-cased category, e.g. met")
    start_time: Optional[datetime] = Field(None, description="Onset, if known")
    end_time: Optional[datetime] = Field(None, description="Expiry, if known")
    areas: List[str] = Field(default_factory=list, description="Affected area names")

    @field_validator("severity", "urgency", "category")
    @classmethod
    def lower_case(cls, value: str) -> str:
        return value.lower()


class Place(BaseModel):
    """A geocoded location."""
    model_config = ConfigDict(frozen=True)

    display_name: str = Field(..., min_length=1, max_length=500)
    address_line1: str = ""
    address_line2: str = ""
    city: str = ""
    region: str = Field("", description="State or province")
    postal_code: str = ""
    country: str = ""
    country_code: str = Field("", description="ISO 3166-1 alpha-2 code")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    place_type: str = Field("", description="house, building, address, city, ...")
    confidence: float = Field(..., ge=0, le=1, description="Match confidence")
    source: str = Field(..., min_length=1, description="Geocoding provider name")
    source_place_id: str = ""
    bounding_box: Optional[List[float]] = Field(None, description="[south, north, west, east]")

    @field_validator("country_code")
    @classmethod
    def upper_country_code(cls, value: str) -> str:
        if value and len(value) != 2:
            raise ValueError("country_code must be 2 characters (ISO 3166-1 alpha-2)")
        return value.upper()


class ProviderResponse(BaseModel):
    """Cache envelope tagging a payload with provenance and freshness."""

    provider: str = Field(..., description="Provider that produced the data")
    timestamp: datetime = Field(..., description="When the data was fetched")
    data: Any = Field(None, description="Opaque payload")
    cached: bool = Field(False, description="Whether this came from the cache")
    ttl: float = Field(0, description="Time-to-live in seconds")
