"""
Per-venue buzz and sentiment extraction from contextual search results.
"""

import logging
from typing import Optional, Protocol

from app.core.schemas import ContextSignal, GeoPoint, SearchResult

logger = logging.getLogger(__name__)

POSITIVE_KEYWORDS = ["best", "amazing", "great", "excellent", "featured", "love", "must-try"]
HIGHLY_POSITIVE_THRESHOLD = 3
MAX_BUZZ_SCORE = 10
MAX_TRENDING_MENTIONS = 5
MAX_RECENT_FEATURES = 3


class ContextualSearch(Protocol):
    async def search(
        self, query: str, near: Optional[GeoPoint] = None
    ) -> list[SearchResult]: ...


def sentiment_score(results: list[SearchResult]) -> int:
    """Sum, over results, of how many distinct positive keywords each one contains."""
    score = 0
    for result in results:
        text = f"{result.title} {result.snippet}".lower()
        score += sum(1 for keyword in POSITIVE_KEYWORDS if keyword in text)
    return score


def build_context_signal(venue_name: str, results: list[SearchResult]) -> ContextSignal:
    if not results:
        return ContextSignal()

    name_lower = venue_name.lower()
    mentions = [r.title for r in results if name_lower in r.snippet.lower()]
    recent_features = [
        f"{r.title} ({r.age})" for r in results if r.age and ("day" in r.age or "hour" in r.age)
    ]
    score = sentiment_score(results)

    return ContextSignal(
        trending_mentions=mentions[:MAX_TRENDING_MENTIONS],
        sentiment_summary="Highly Positive" if score > HIGHLY_POSITIVE_THRESHOLD else "Neutral",
        recent_features=recent_features[:MAX_RECENT_FEATURES],
        social_buzz_score=min(score, MAX_BUZZ_SCORE),
    )


class ContextEnricher:
    """Looks up recent reviews for a venue and condenses them into a ContextSignal."""

    def __init__(self, search: ContextualSearch):
        self.search = search

    async def enrich(self, venue_name: str, venue_address: str) -> ContextSignal:
        query = f"{venue_name} {venue_address} reviews trending"
        try:
            results = await self.search.search(query)
        except Exception as e:
            logger.warning(f"Context search failed for '{venue_name}': {e}")
            return ContextSignal()

        return build_context_signal(venue_name, results)
