"""
LocationIQ geocoding integration with caching and outbound rate limiting.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

from app.core.rate_limiter import AsyncRateLimiter
from app.core.repository import GeocodeCache
from app.core.schemas import GeocodeResult
from app.core.settings import Settings

logger = logging.getLogger(__name__)


def normalize_address(address: str) -> str:
    return address.lower().strip()


class LocationIQGeocodingService:
    """Service for resolving free-text places to coordinates."""

    def __init__(
        self,
        api_key: str,
        cache: GeocodeCache,
        rate_limiter: AsyncRateLimiter,
        base_url: str = "https://us1.locationiq.com/v1",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            logger.warning("LOCATIONIQ_API_KEY not set. Only cached geocodes will resolve.")
        self.api_key = api_key
        self.cache = cache
        self.rate_limiter = rate_limiter
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, cache: GeocodeCache) -> "LocationIQGeocodingService":
        return cls(
            api_key=settings.locationiq_api_key,
            cache=cache,
            rate_limiter=AsyncRateLimiter(
                settings.geocode_rate_limit_calls, settings.geocode_rate_limit_period
            ),
            base_url=settings.locationiq_base_url,
            timeout=settings.geocode_timeout_seconds,
        )

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        async with self.rate_limiter:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}/{path}",
                    params={"key": self.api_key, "format": "json", **params},
                    timeout=self.timeout,
                )
                response.raise_for_status()
                return response.json()

    async def geocode(self, address: str) -> Optional[GeocodeResult]:
        """
        Geocode a free-text query to coordinates.

        Flow:
        1. Check cache (keyed by the normalized query)
        2. If not found, call LocationIQ through the rate limiter
        3. Store the result in the cache

        Args:
            address: Query such as "Blue Note, near 40.7,-73.9"

        Returns:
            GeocodeResult, or None if nothing matched or the call failed
        """
        normalized = normalize_address(address)
        if not normalized:
            return None

        try:
            cached = await asyncio.to_thread(self.cache.get_cached_geocode, normalized)
        except Exception as e:
            logger.warning(f"Geocoding cache lookup failed for '{normalized}': {e}")
            cached = None
        if cached:
            return cached

        if not self.api_key:
            return None

        try:
            data = await self._get("search.php", {"q": address, "limit": 1})
            if not data:
                return None

            first = data[0]
            result = GeocodeResult(
                lat=float(first["lat"]),
                lon=float(first["lon"]),
                display_name=first.get("display_name", ""),
            )
        except Exception as e:
            logger.error(f"LocationIQ geocoding error for '{address}': {e}")
            return None

        try:
            await asyncio.to_thread(self.cache.cache_geocode, normalized, result)
        except Exception as e:
            logger.warning(f"Failed to cache geocode for '{normalized}': {e}")

        return result

    async def reverse_geocode(self, lat: float, lon: float) -> Optional[str]:
        """Return a display address for coordinates, or None."""
        if not self.api_key:
            return None

        try:
            data = await self._get("reverse.php", {"lat": lat, "lon": lon})
            return (data or {}).get("display_name") or None
        except Exception as e:
            logger.error(f"LocationIQ reverse geocoding error for ({lat}, {lon}): {e}")
            return None

    def get_static_map_url(self, lat: float, lon: float, zoom: int = 14) -> str:
        return (
            f"{self.base_url}/staticmap?key={self.api_key}&center={lat},{lon}"
            f"&zoom={zoom}&size=600x400&format=png&markers=icon:red-cutout|{lat},{lon}"
        )
