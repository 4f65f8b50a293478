"""Unit and vocabulary converters for upstream weather data."""

from datetime import datetime

MPH_TO_MS = 0.44704

# 16-point compass rose, 22.5 degree steps
COMPASS_DEGREES = {
    "N": 0.0, "NNE": 22.5, "NE": 45.0, "ENE": 67.5,
    "E": 90.0, "ESE": 112.5, "SE": 135.0, "SSE": 157.5,
    "S": 180.0, "SSW": 202.5, "SW": 225.0, "WSW": 247.5,
    "W": 270.0, "WNW": 292.5, "NW": 315.0, "NNW": 337.5,
}


def fahrenheit_to_celsius(value: float) -> float:
    return (value - 32) * 5 / 9


def mph_to_ms(value: float) -> float:
    return value * MPH_TO_MS


def pa_to_hpa(value: float) -> float:
    return value / 100


def meters_to_km(value: float) -> float:
    return value / 1000


def compass_to_degrees(direction: str) -> float:
    """Map a compass abbreviation such as "NNE" to degrees.

    Unknown or empty directions map to 0 (north).
    """
    return COMPASS_DEGREES.get((direction or "").strip().upper(), 0.0)


def parse_wind_speed(text: str) -> float:
    """Parse NWS wind text like "10 mph" or "5 to 10 mph" into m/s.

    The first token is taken as the magnitude. Anything unparsable gives 0.
    """
    parts = (text or "").split()
    if len(parts) < 2:
        return 0.0
    try:
        speed = int(parts[0])
    except ValueError:
        return 0.0
    return mph_to_ms(speed)


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC3339 timestamp into an aware datetime.

    Raises:
        ValueError: If the value is malformed or carries no UTC offset
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp has no UTC offset: {value}")
    return parsed
