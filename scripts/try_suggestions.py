"""
Manual check of the suggestion pipeline against the live You.com and LocationIQ APIs.

Usage:
    python scripts/try_suggestions.py "live music" chill
"""

import asyncio
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.core.geocoding_service import LocationIQGeocodingService
from app.core.recommendation_engine import RecommendationEngine
from app.core.repository import get_repository
from app.core.schemas import MemberLocation
from app.core.search_service import YouSearchService
from app.core.settings import get_settings

MEMBERS = [
    MemberLocation(id="alice", name="Alice", lat=40.7128, lon=-74.0060, weight=1.5),
    MemberLocation(id="bob", name="Bob", lat=40.6782, lon=-73.9442),
    MemberLocation(id="cara", name="Cara", lat=40.7282, lon=-73.7949),
]


async def main(activity_type: str, mood: str) -> None:
    settings = get_settings()
    repo = get_repository(settings)
    engine = RecommendationEngine(
        search=YouSearchService.from_settings(settings),
        geocoder=LocationIQGeocodingService.from_settings(settings, cache=repo),
        preference_history=repo,
        settings=settings,
    )

    print(f"Searching for '{activity_type}' ({mood}) for {len(MEMBERS)} members...")
    suggestions = await engine.get_smart_suggestions(MEMBERS, activity_type, mood)

    print(f"Found {len(suggestions)} suggestions")
    for i, venue in enumerate(suggestions, 1):
        print(f"\n{i}. {venue.name} (ALS {venue.als_score})")
        print(f"   Address: {venue.address}")
        print(f"   Buzz: {venue.context.social_buzz_score} ({venue.context.sentiment_summary})")
        for member_id, minutes in venue.travel_times_minutes.items():
            print(f"   {member_id}: ~{minutes:.0f} min")


if __name__ == "__main__":
    activity = sys.argv[1] if len(sys.argv) > 1 else "dinner"
    vibe = sys.argv[2] if len(sys.argv) > 2 else "cozy"
    asyncio.run(main(activity, vibe))
