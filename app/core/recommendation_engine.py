"""
Venue recommendation engine.

Finds the group's weighted meeting point, searches for venues matching the
activity and mood (biased by past feedback), then geocodes, enriches and
scores every candidate concurrently before returning the best few.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from app.core.context_enricher import ContextEnricher, ContextualSearch
from app.core.geo_utils import weighted_centroid
from app.core.preference_aggregator import synthesize_preference_bias
from app.core.repository import PreferenceHistory
from app.core.schemas import (
    GeocodeResult,
    GeoPoint,
    MemberLocation,
    PreferenceSignal,
    VenueCandidate,
    VenueSuggestion,
)
from app.core.scoring import compute_als_score, rank_suggestions
from app.core.settings import Settings
from app.core.travel_time_utils import compute_travel_times
from app.core.venue_extractor import extract_candidate_names

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    async def geocode(self, address: str) -> Optional[GeocodeResult]: ...


def build_search_query(activity_type: str, mood: str, preference_bias: str = "") -> str:
    return f"best {activity_type} in {mood} style trending.{preference_bias}"


class RecommendationEngine:
    def __init__(
        self,
        search: ContextualSearch,
        geocoder: Geocoder,
        preference_history: PreferenceHistory,
        settings: Optional[Settings] = None,
    ):
        settings = settings or Settings()
        self.search = search
        self.geocoder = geocoder
        self.preference_history = preference_history
        self.enricher = ContextEnricher(search)
        self.average_speed_kmh = settings.average_speed_kmh
        self.max_candidates = settings.max_candidates
        self.max_suggestions = settings.max_suggestions
        self.preference_window = settings.preference_window

    async def _load_preference_signals(
        self, members: list[MemberLocation]
    ) -> list[PreferenceSignal]:
        member_ids = {m.id for m in members}
        try:
            # Repository calls block, keep them off the event loop
            return await asyncio.to_thread(
                self.preference_history.get_recent_preference_signals,
                member_ids,
                limit=self.preference_window,
            )
        except Exception as e:
            logger.warning(f"Preference history unavailable, searching without bias: {e}")
            return []

    async def get_smart_suggestions(
        self, members: list[MemberLocation], activity_type: str, mood: str
    ) -> list[VenueSuggestion]:
        """
        Rank venues for a group outing.

        Args:
            members: Group members with weighted locations
            activity_type: e.g. "dinner", "bowling"
            mood: e.g. "chill", "lively"

        Returns:
            At most ``max_suggestions`` venues, best ALS first. Collaborator
            failures shrink the list rather than raising.

        Raises:
            InvalidGroupError: If no meeting point can be computed
        """
        _, suggestions = await self.recommend(members, activity_type, mood)
        return suggestions

    async def recommend(
        self, members: list[MemberLocation], activity_type: str, mood: str
    ) -> tuple[GeoPoint, list[VenueSuggestion]]:
        """Same as ``get_smart_suggestions`` but also returns the meeting point used."""
        # Step 1: Optimal meeting point
        centroid = weighted_centroid(members)

        # Step 2: Personalize the query with past feedback
        signals = await self._load_preference_signals(members)
        preference_bias = synthesize_preference_bias(signals)

        # Step 3: One contextual search near the meeting point
        query = build_search_query(activity_type, mood, preference_bias)
        try:
            results = await self.search.search(query, near=centroid)
        except Exception as e:
            logger.error(f"Venue search failed for '{query}': {e}", exc_info=True)
            return centroid, []

        # Step 4: Candidate venue names
        names = extract_candidate_names(results, limit=self.max_candidates)
        if not names:
            logger.info(f"No venue candidates found for '{query}'")
            return centroid, []

        candidates = [VenueCandidate(name=name, near=centroid) for name in names]

        # Step 5: Geocode, enrich and score every candidate concurrently
        outcomes = await asyncio.gather(
            *(self._evaluate_candidate(candidate, members) for candidate in candidates),
            return_exceptions=True,
        )

        suggestions: list[VenueSuggestion] = []
        for candidate, outcome in zip(candidates, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"Dropping candidate '{candidate.name}': {outcome}")
            elif outcome is not None:
                suggestions.append(outcome)

        logger.info(
            f"Scored {len(suggestions)} of {len(candidates)} candidates for '{activity_type}'"
        )

        # Step 6: Rank
        return centroid, rank_suggestions(suggestions, limit=self.max_suggestions)

    async def _evaluate_candidate(
        self, candidate: VenueCandidate, members: list[MemberLocation]
    ) -> Optional[VenueSuggestion]:
        geocode_query = f"{candidate.name}, near {candidate.near.lat},{candidate.near.lon}"
        geocoded = await self.geocoder.geocode(geocode_query)
        if not geocoded:
            logger.debug(f"Could not geocode candidate '{candidate.name}'")
            return None

        venue_point = GeoPoint(lat=geocoded.lat, lon=geocoded.lon)
        travel_times, max_travel_time = compute_travel_times(
            members, venue_point, self.average_speed_kmh
        )

        context = await self.enricher.enrich(candidate.name, geocoded.display_name)

        return VenueSuggestion(
            name=candidate.name,
            address=geocoded.display_name,
            lat=geocoded.lat,
            lon=geocoded.lon,
            als_score=compute_als_score(max_travel_time, context.social_buzz_score),
            context=context,
            travel_times_minutes=travel_times,
            extras={
                "geocode_query": geocode_query,
                "max_travel_minutes": f"{max_travel_time:.1f}",
            },
        )
