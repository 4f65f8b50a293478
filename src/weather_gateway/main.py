"""Composition root and command-line entry point for the weather gateway."""

import argparse
import asyncio
import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from weather_gateway.cache.redis_store import RedisKVStore
from weather_gateway.cache.request_cache import RequestCache
from weather_gateway.config import CACHE_PREFIX, REDIS_URL
from weather_gateway.logging_config import configure_logging
from weather_gateway.providers.census import CensusProvider
from weather_gateway.providers.errors import ProviderError
from weather_gateway.providers.nws import NWSProvider
from weather_gateway.providers.registry import ProviderRegistry
from weather_gateway.service import GatewayService

logger = logging.getLogger(__name__)


def build_registry() -> ProviderRegistry:
    """Create a registry holding the default NWS and Census providers."""
    registry = ProviderRegistry()
    registry.register_weather_provider(NWSProvider())
    registry.register_geocode_provider(CensusProvider())
    return registry


@asynccontextmanager
async def create_service(redis_url: str = REDIS_URL, prefix: str = CACHE_PREFIX) -> AsyncIterator[GatewayService]:
    """Build the gateway service and release its resources on exit.

    The registry and the Redis connection are created here and owned by this
    context; the service itself holds no resources.
    """
    registry = build_registry()
    cache = RequestCache(RedisKVStore.from_url(redis_url), prefix=prefix)
    try:
        yield GatewayService(registry, cache)
    finally:
        logger.info("Shutting down weather gateway")
        await registry.aclose()
        await cache.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="weather-gateway", description="Query weather and geocoding providers")
    parser.add_argument("--provider", default=None, help="Provider name (default: first that succeeds)")
    parser.add_argument("--redis-url", default=REDIS_URL, help="Redis URL for the cache")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command in ("current", "alerts", "reverse"):
        sub = subparsers.add_parser(command)
        sub.add_argument("lat", type=float)
        sub.add_argument("lon", type=float)

    forecast = subparsers.add_parser("forecast")
    forecast.add_argument("lat", type=float)
    forecast.add_argument("lon", type=float)
    forecast.add_argument("--days", type=int, default=3)

    geocode = subparsers.add_parser("geocode")
    geocode.add_argument("address")

    return parser


async def run(args: argparse.Namespace) -> str:
    """Run one query and return the response as JSON."""
    async with create_service(redis_url=args.redis_url) as service:
        if args.command == "current":
            response = await service.current_weather(args.lat, args.lon, provider=args.provider)
        elif args.command == "forecast":
            response = await service.forecast(args.lat, args.lon, args.days, provider=args.provider)
        elif args.command == "alerts":
            response = await service.alerts(args.lat, args.lon, provider=args.provider)
        elif args.command == "geocode":
            response = await service.geocode(args.address, provider=args.provider)
        else:
            response = await service.reverse_geocode(args.lat, args.lon, provider=args.provider)

    return json.dumps(response.model_dump(mode="json"), indent=2)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line."""
    configure_logging()
    args = build_parser().parse_args(argv)

    try:
        print(asyncio.run(run(args)))
    except ProviderError as e:
        logger.error(f"Query failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
