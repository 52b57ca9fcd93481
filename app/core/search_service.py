"""
You.com search API integration for contextual venue information.
"""

import logging
from typing import Any, Optional

import httpx

from app.core.schemas import GeoPoint, SearchResult
from app.core.settings import Settings

logger = logging.getLogger(__name__)


class YouSearchService:
    """Service for free-text web search near a location."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.you.com",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            logger.warning("YOU_API_KEY not set. Contextual search will return no results.")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "YouSearchService":
        return cls(
            api_key=settings.you_api_key,
            base_url=settings.you_api_base,
            timeout=settings.search_timeout_seconds,
        )

    async def search(self, query: str, near: Optional[GeoPoint] = None) -> list[SearchResult]:
        """
        Search recent, safe results for a query.

        Args:
            query: Free-text query
            near: Optional point appended to the query as "near lat,lon"

        Returns:
            Ordered results, or an empty list on any failure
        """
        if not self.api_key:
            return []

        location_query = f"{query} near {near.lat},{near.lon}" if near else query
        params = {
            "query": location_query,
            "count": 10,
            "safeSearch": "strict",
            "freshness": "week",  # Only recent results
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}/search",
                    headers={"X-API-Key": self.api_key},
                    params=params,
                    timeout=self.timeout,
                )
                response.raise_for_status()
                data: dict[str, Any] = response.json()

            hits = (data.get("results") or {}).get("hits") or []
            return [
                SearchResult(
                    title=hit.get("title") or "",
                    snippet=hit.get("snippet") or hit.get("description") or "",
                    url=hit.get("url") or "",
                    age=hit.get("age"),
                )
                for hit in hits
            ]

        except Exception as e:
            logger.error(f"You.com search error for '{query}': {e}")
            return []
