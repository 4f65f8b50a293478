"""US Census geocoder provider."""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from weather_gateway.config import (
    CENSUS_BASE_URL, CENSUS_BENCHMARK, CENSUS_VINTAGE,
    HTTP_TIMEOUT_SECONDS, USER_AGENT
)
from weather_gateway.providers.base import GeocodeProvider
from weather_gateway.providers.client import JSONClient
from weather_gateway.providers.errors import DecodeError, NoResultsError, ProviderError, wrap_error
from weather_gateway.providers.models import Place
from weather_gateway.providers.schemas import CensusAddressComponents, CensusAddressMatch

logger = logging.getLogger(__name__)

REVERSE_GEOCODE_CONFIDENCE = 0.9
DEFAULT_CONFIDENCE = 0.5
MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.95


def build_address_line1(components: CensusAddressComponents) -> str:
    """Assemble a street line from Census address components.

    The order is fixed: house number range, pre-direction, pre-type, street
    name, suffix type, suffix direction, pre-qualifier, suffix qualifier.
    Empty components are left out.
    """
    parts = []

    if components.from_address:
        if components.to_address and components.to_address != components.from_address:
            parts.append(f"{components.from_address}-{components.to_address}")
        else:
            parts.append(components.from_address)

    parts.extend(
        part for part in (
            components.pre_direction,
            components.pre_type,
            components.street_name,
            components.suffix_type,
            components.suffix_direction,
            components.pre_qualifier,
            components.suffix_qualifier,
        ) if part
    )

    return " ".join(parts)


def calculate_confidence(original: str, matched: str) -> float:
    """Score how well a matched address corresponds to the query.

    Returns 0.5 for an empty query and 1.0 for an exact (case and whitespace
    insensitive) match. Otherwise returns the share of query words found in
    the match, clamped to [0.1, 0.95].
    """
    original_words = original.lower().split()
    matched_words = matched.lower().split()

    if not original_words:
        return DEFAULT_CONFIDENCE
    if original_words == matched_words:
        return 1.0

    matched_set = set(matched_words)
    common_words = sum(1 for word in original_words if word in matched_set)
    similarity = common_words / len(original_words)

    return min(max(similarity, MIN_CONFIDENCE), MAX_CONFIDENCE)


class CensusProvider(GeocodeProvider):
    """Geocode provider for the US Census Bureau geocoder."""

    def __init__(
        self,
        base_url: str = CENSUS_BASE_URL,
        user_agent: str = USER_AGENT,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the Census provider.

        Args:
            base_url: Base URL for the Census geocoder
            user_agent: User-Agent header for API requests
            timeout: Request timeout in seconds
            client: Preconfigured httpx client (creates one if None)
        """
        self.base_url = base_url.rstrip("/")
        self.http = JSONClient(user_agent=user_agent, timeout=timeout, client=client)

    @property
    def name(self) -> str:
        return "Census"

    def supported_regions(self) -> List[str]:
        return ["US"]

    async def geocode_address(self, address: str) -> List[Place]:
        """Geocode a one-line address.

        Args:
            address: Free-text address

        Returns:
            Candidate places in the order the geocoder ranked them

        Raises:
            ProviderError: If the request fails
            NoResultsError: If no usable match was returned
        """
        params = {
            "address": address,
            "format": "json",
            "benchmark": CENSUS_BENCHMARK,
            "vintage": CENSUS_VINTAGE,
        }

        logger.info(f"Geocoding address: {address}")
        try:
            data = await self.http.get_json(f"{self.base_url}/locations/onelineaddress", params=params)
            matches = _address_matches(data)
        except ProviderError as e:
            raise wrap_error("geocoding request failed", e) from e

        places = []
        for raw_match in matches:
            try:
                match = CensusAddressMatch.model_validate(raw_match)
                places.append(self._match_to_place(match, address))
            except (ValidationError, ValueError) as e:
                logger.warning(f"Skipping invalid address match: {e}")
                continue

        if not places:
            raise NoResultsError(f"no geocoding results found for address: {address}")

        logger.info(f"Geocoded '{address}' to {len(places)} candidates")
        return places

    async def reverse_geocode(self, lat: float, lon: float) -> Place:
        """Find the address at a coordinate.

        Only the first match is used, with a fixed confidence.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            Best-matching place

        Raises:
            ProviderError: If the request fails or the match is malformed
            NoResultsError: If no match was returned
        """
        params = {
            "x": f"{lon:.6f}",
            "y": f"{lat:.6f}",
            "format": "json",
            "benchmark": CENSUS_BENCHMARK,
            "vintage": CENSUS_VINTAGE,
        }

        logger.info(f"Reverse geocoding coordinates: ({lat}, {lon})")
        try:
            data = await self.http.get_json(f"{self.base_url}/locations/reversegeocoding", params=params)
            matches = _address_matches(data)
        except ProviderError as e:
            raise wrap_error("reverse geocoding request failed", e) from e

        if not matches:
            raise NoResultsError(f"no reverse geocoding results found for coordinates: {lat:f}, {lon:f}")

        try:
            match = CensusAddressMatch.model_validate(matches[0])
            return self._reverse_match_to_place(match, lat, lon)
        except ValidationError as e:
            raise DecodeError(f"failed to parse reverse geocoding response: {e}") from e

    def _match_to_place(self, match: CensusAddressMatch, original_address: str) -> Place:
        if match.coordinates is None:
            raise ValueError(f"match '{match.matched_address}' has no coordinates")

        return self._build_place(
            match,
            latitude=match.coordinates.y,
            longitude=match.coordinates.x,
            confidence=calculate_confidence(original_address, match.matched_address),
        )

    def _reverse_match_to_place(self, match: CensusAddressMatch, lat: float, lon: float) -> Place:
        return self._build_place(match, latitude=lat, longitude=lon, confidence=REVERSE_GEOCODE_CONFIDENCE)

    def _build_place(
        self,
        match: CensusAddressMatch,
        latitude: float,
        longitude: float,
        confidence: float
    ) -> Place:
        components = match.address_components
        return Place(
            display_name=match.matched_address,
            address_line1=build_address_line1(components),
            city=components.city,
            region=components.state,
            postal_code=components.zip,
            country="United States",
            country_code="US",
            latitude=latitude,
            longitude=longitude,
            place_type="address",
            confidence=confidence,
            source=self.name,
            source_place_id=match.tiger_line.tiger_line_id,
        )

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self.http.aclose()


def _address_matches(data: Dict[str, Any]) -> List[Any]:
    result = data.get("result")
    if not isinstance(result, dict):
        raise DecodeError("failed to parse geocoding response: missing result")

    matches = result.get("addressMatches") or []
    if not isinstance(matches, list):
        raise DecodeError("failed to parse geocoding response: addressMatches is not a list")
    return matches
