"""Raw response models for the upstream NWS and Census APIs.

Only the fields the adapters read are declared; everything else is ignored.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class UpstreamModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def null_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        """Upstream APIs send JSON null for absent values; optional fields fall back to their default."""
        if value is None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return value


# NWS (api.weather.gov)

class NWSPointProperties(UpstreamModel):
    grid_id: str = Field("", alias="gridId")
    grid_x: int = Field(0, alias="gridX")
    grid_y: int = Field(0, alias="gridY")
    forecast: str = Field(..., description="Forecast URL for this grid point")
    forecast_hourly: str = Field("", alias="forecastHourly")
    observation_stations: str = Field("", alias="observationStations")


class NWSPointResponse(UpstreamModel):
    properties: NWSPointProperties


class NWSStationProperties(UpstreamModel):
    station_identifier: str = Field(..., alias="stationIdentifier")


class NWSStationFeature(UpstreamModel):
    properties: NWSStationProperties


class NWSStationsResponse(UpstreamModel):
    features: List[NWSStationFeature] = Field(default_factory=list)


class NWSQuantitativeValue(UpstreamModel):
    """A measurement whose value may be missing; zero is a real reading."""
    value: Optional[float] = None
    unit_code: str = Field("", alias="unitCode")


class NWSObservationProperties(UpstreamModel):
    timestamp: str = ""
    text_description: str = Field("", alias="textDescription")
    temperature: NWSQuantitativeValue = Field(default_factory=NWSQuantitativeValue)
    dewpoint: NWSQuantitativeValue = Field(default_factory=NWSQuantitativeValue)
    wind_direction: NWSQuantitativeValue = Field(default_factory=NWSQuantitativeValue, alias="windDirection")
    wind_speed: NWSQuantitativeValue = Field(default_factory=NWSQuantitativeValue, alias="windSpeed")
    barometric_pressure: NWSQuantitativeValue = Field(default_factory=NWSQuantitativeValue, alias="barometricPressure")
    relative_humidity: NWSQuantitativeValue = Field(default_factory=NWSQuantitativeValue, alias="relativeHumidity")
    visibility: NWSQuantitativeValue = Field(default_factory=NWSQuantitativeValue)


class NWSObservationResponse(UpstreamModel):
    properties: NWSObservationProperties


class NWSForecastPeriod(UpstreamModel):
    number: int = 0
    name: str = ""
    start_time: str = Field(..., alias="startTime")
    end_time: str = Field(..., alias="endTime")
    is_daytime: bool = Field(False, alias="isDaytime")
    temperature: int
    temperature_unit: str = Field("F", alias="temperatureUnit")
    wind_speed: str = Field("", alias="windSpeed")
    wind_direction: str = Field("", alias="windDirection")
    short_forecast: str = Field("", alias="shortForecast")
    detailed_forecast: str = Field("", alias="detailedForecast")


class NWSAlertProperties(UpstreamModel):
    id: str
    event: str = ""
    description: str = ""
    severity: str = ""
    urgency: str = ""
    category: str = ""
    onset: Optional[str] = None
    expires: Optional[str] = None
    area_desc: str = Field("", alias="areaDesc")


class NWSAlertFeature(UpstreamModel):
    properties: NWSAlertProperties


# US Census geocoder

class CensusCoordinates(UpstreamModel):
    x: float
    y: float


class CensusTigerLine(UpstreamModel):
    side: str = ""
    tiger_line_id: str = Field("", alias="tigerLineId")


class CensusAddressComponents(UpstreamModel):
    zip: str = ""
    street_name: str = Field("", alias="streetName")
    pre_type: str = Field("", alias="preType")
    city: str = ""
    pre_direction: str = Field("", alias="preDirection")
    suffix_direction: str = Field("", alias="suffixDirection")
    from_address: str = Field("", alias="fromAddress")
    state: str = ""
    suffix_type: str = Field("", alias="suffixType")
    to_address: str = Field("", alias="toAddress")
    suffix_qualifier: str = Field("", alias="suffixQualifier")
    pre_qualifier: str = Field("", alias="preQualifier")


class CensusAddressMatch(UpstreamModel):
    matched_address: str = Field(..., alias="matchedAddress")
    coordinates: Optional[CensusCoordinates] = None
    tiger_line: CensusTigerLine = Field(default_factory=CensusTigerLine, alias="tigerLine")
    address_components: CensusAddressComponents = Field(
        default_factory=CensusAddressComponents, alias="addressComponents"
    )
