from typing import Optional

import pytest

from app.core.recommendation_engine import RecommendationEngine
from app.core.repository import InMemoryRepo
from app.core.schemas import GeocodeResult, GeoPoint, SearchResult
from app.core.settings import Settings


class FakeSearch:
    """Venue search returns ``venue_results``; review searches are matched by venue name prefix."""

    def __init__(self):
        self.venue_results: list[SearchResult] = []
        self.context_results: dict[str, list[SearchResult]] = {}
        self.failing_contexts: set[str] = set()
        self.fail_venue_search = False
        self.calls: list[tuple[str, Optional[GeoPoint]]] = []

    async def search(self, query: str, near: Optional[GeoPoint] = None) -> list[SearchResult]:
        self.calls.append((query, near))
        if near is not None:
            if self.fail_venue_search:
                raise RuntimeError("search service down")
            return self.venue_results

        for name in self.failing_contexts:
            if query.startswith(f"{name} "):
                raise RuntimeError("search service down")
        for name, results in self.context_results.items():
            if query.startswith(f"{name} "):
                return results
        return []


class FakeGeocoder:
    def __init__(self):
        self.venues: dict[str, GeocodeResult] = {}
        self.failing: set[str] = set()
        self.queries: list[str] = []

    async def geocode(self, address: str) -> Optional[GeocodeResult]:
        self.queries.append(address)
        name = address.split(", near ")[0]
        if name in self.failing:
            raise RuntimeError("geocoder down")
        return self.venues.get(name)

    async def reverse_geocode(self, lat: float, lon: float) -> Optional[str]:
        for result in self.venues.values():
            if result.lat == lat and result.lon == lon:
                return result.display_name
        return None

    def get_static_map_url(self, lat: float, lon: float, zoom: int = 14) -> str:
        return f"https://maps.test/static?center={lat},{lon}&zoom={zoom}"


@pytest.fixture
def fake_search() -> FakeSearch:
    return FakeSearch()


@pytest.fixture
def fake_geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def repo() -> InMemoryRepo:
    return InMemoryRepo()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        average_speed_kmh=50,
        max_candidates=10,
        max_suggestions=5,
        preference_window=20,
    )


@pytest.fixture
def engine(fake_search, fake_geocoder, repo, settings) -> RecommendationEngine:
    return RecommendationEngine(
        search=fake_search,
        geocoder=fake_geocoder,
        preference_history=repo,
        settings=settings,
    )
