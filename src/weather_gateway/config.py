"""Configuration settings for the weather gateway."""

import os
from typing import Final
from dotenv import load_dotenv

load_dotenv()

# Upstream API configuration
NWS_BASE_URL: str = os.getenv("NWS_BASE_URL", "https://api.weather.gov")
CENSUS_BASE_URL: str = os.getenv("CENSUS_BASE_URL", "https://geocoding.geo.census.gov/geocoder")
USER_AGENT: str = os.getenv("USER_AGENT", "weather-gateway/1.0 (contact@example.com)")
HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))

# Census geocoder query constants
CENSUS_BENCHMARK: Final[str] = "2020"
CENSUS_VINTAGE: Final[str] = "Current_Current"

# Redis cache configuration
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
CACHE_PREFIX: str = os.getenv("CACHE_PREFIX", "weather-gateway")

# Cache TTLs, in seconds
CURRENT_WEATHER_TTL_SECONDS: int = int(os.getenv("CURRENT_WEATHER_TTL_SECONDS", "600"))  # 10 minutes
FORECAST_TTL_SECONDS: int = int(os.getenv("FORECAST_TTL_SECONDS", "1800"))  # 30 minutes
ALERTS_TTL_SECONDS: int = int(os.getenv("ALERTS_TTL_SECONDS", "600"))
GEOCODE_TTL_SECONDS: int = int(os.getenv("GEOCODE_TTL_SECONDS", "86400"))  # static location data, 24h

# Concurrent fill deduplication
FILL_LOCK_TTL_SECONDS: int = int(os.getenv("FILL_LOCK_TTL_SECONDS", "10"))
FILL_WAIT_ATTEMPTS: int = int(os.getenv("FILL_WAIT_ATTEMPTS", "5"))
FILL_WAIT_INTERVAL_SECONDS: float = float(os.getenv("FILL_WAIT_INTERVAL_SECONDS", "0.2"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
