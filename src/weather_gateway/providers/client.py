"""Shared async HTTP transport for the upstream JSON APIs."""

import logging
from typing import Any, Dict, Optional

import httpx

from weather_gateway.config import HTTP_TIMEOUT_SECONDS, USER_AGENT
from weather_gateway.providers.errors import DecodeError, TransportError

logger = logging.getLogger(__name__)


class JSONClient:
    """Async client that fetches JSON objects from upstream APIs.

    The client only checks transport-level concerns (status code and a
    well-formed top-level JSON object). Mapping the object onto a typed
    response is left to the caller, so transport errors stay distinguishable
    from domain-mapping errors.
    """

    def __init__(
        self,
        user_agent: str = USER_AGENT,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the JSON client.

        Args:
            user_agent: User-Agent header for API requests
            timeout: Request timeout in seconds
            client: Preconfigured httpx client (creates one if None)
        """
        self.user_agent = user_agent
        self.headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self.client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Fetch a URL and decode its body as a JSON object.

        Args:
            url: Absolute URL to fetch
            params: Optional query parameters

        Returns:
            Decoded top-level JSON object

        Raises:
            TransportError: If the request fails or the status is not 200
            DecodeError: If the body is not a JSON object
        """
        logger.debug(f"GET {url} params={params}")

        try:
            response = await self.client.get(url, params=params, headers=self.headers)
        except httpx.HTTPError as e:
            logger.error(f"HTTP request to {url} failed: {e}")
            raise TransportError(f"HTTP request failed: {e}") from e

        if response.status_code != httpx.codes.OK:
            logger.error(f"Upstream returned {response.status_code} for {url}")
            raise TransportError(
                f"API request failed with status {response.status_code}",
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to decode response from {url}: {e}")
            raise DecodeError(f"failed to decode response: {e}") from e

        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}")

        return data

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()
