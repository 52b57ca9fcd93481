import threading

import httpx
import pytest

from app.core.geocoding_service import LocationIQGeocodingService, normalize_address
from app.core.rate_limiter import AsyncRateLimiter
from app.core.repository import InMemoryRepo
from app.core.schemas import GeocodeResult

BLUE_NOTE = [{"lat": "40.7308", "lon": "-74.0007", "display_name": "Blue Note, 131 W 3rd St"}]


def _service(handler, cache=None, api_key="test-key") -> LocationIQGeocodingService:
    return LocationIQGeocodingService(
        api_key=api_key,
        cache=cache if cache is not None else InMemoryRepo(),
        rate_limiter=AsyncRateLimiter(max_calls=100, period=1.0),
        base_url="https://locationiq.test/v1",
        transport=httpx.MockTransport(handler),
    )


def test_normalize_address():
    assert normalize_address("  Blue Note, NEAR 40.7,-74.0 ") == "blue note, near 40.7,-74.0"


@pytest.mark.asyncio
async def test_geocode_calls_api_then_serves_from_cache():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=BLUE_NOTE)

    cache = InMemoryRepo()
    service = _service(handler, cache)

    first = await service.geocode("Blue Note, near 40.7,-74.0")
    second = await service.geocode("  blue note, near 40.7,-74.0")

    assert first == GeocodeResult(lat=40.7308, lon=-74.0007, display_name="Blue Note, 131 W 3rd St")
    assert second == first
    assert len(seen) == 1
    assert seen[0].url.path == "/v1/search.php"
    assert seen[0].url.params["q"] == "Blue Note, near 40.7,-74.0"
    assert seen[0].url.params["limit"] == "1"
    assert seen[0].url.params["format"] == "json"
    assert seen[0].url.params["key"] == "test-key"
    assert cache.geocode_hits("blue note, near 40.7,-74.0") == 1


@pytest.mark.asyncio
async def test_geocode_empty_query_returns_none():
    service = _service(lambda request: httpx.Response(200, json=BLUE_NOTE))
    assert await service.geocode("   ") is None


@pytest.mark.asyncio
async def test_geocode_no_match_returns_none_and_is_not_cached():
    cache = InMemoryRepo()
    service = _service(lambda request: httpx.Response(200, json=[]), cache)

    assert await service.geocode("Nowhere") is None
    assert cache.get_cached_geocode("nowhere") is None


@pytest.mark.asyncio
async def test_geocode_http_error_returns_none():
    service = _service(lambda request: httpx.Response(404, json={"error": "Unable to geocode"}))
    assert await service.geocode("Nowhere") is None


@pytest.mark.asyncio
async def test_geocode_without_api_key_uses_cache_only():
    cache = InMemoryRepo()
    cached = GeocodeResult(lat=1.0, lon=2.0, display_name="Cached")
    cache.cache_geocode("cached place", cached)
    service = _service(lambda request: httpx.Response(200, json=BLUE_NOTE), cache, api_key="")

    assert await service.geocode("Cached Place") == cached
    assert await service.geocode("Blue Note") is None


@pytest.mark.asyncio
async def test_reverse_geocode():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"display_name": "131 W 3rd St, New York"})

    name = await _service(handler).reverse_geocode(40.7308, -74.0007)

    assert name == "131 W 3rd St, New York"
    assert seen[0].url.path == "/v1/reverse.php"
    assert seen[0].url.params["lat"] == "40.7308"


@pytest.mark.asyncio
async def test_reverse_geocode_error_returns_none():
    service = _service(lambda request: httpx.Response(500))
    assert await service.reverse_geocode(0, 0) is None


def test_static_map_url():
    service = _service(lambda request: httpx.Response(200))
    url = service.get_static_map_url(40.5, -74.25, zoom=12)
    assert url.startswith("https://locationiq.test/v1/staticmap?key=test-key")
    assert "center=40.5,-74.25" in url
    assert "zoom=12" in url
    assert "markers=icon:red-cutout|40.5,-74.25" in url


class _ThreadRecordingCache(InMemoryRepo):
    def __init__(self):
        super().__init__()
        self.threads: list[int] = []

    def get_cached_geocode(self, address_query):
        self.threads.append(threading.get_ident())
        return super().get_cached_geocode(address_query)

    def cache_geocode(self, address_query, result):
        self.threads.append(threading.get_ident())
        super().cache_geocode(address_query, result)


@pytest.mark.asyncio
async def test_cache_calls_run_off_the_event_loop_thread():
    cache = _ThreadRecordingCache()
    service = _service(lambda request: httpx.Response(200, json=BLUE_NOTE), cache)

    await service.geocode("Blue Note")

    assert len(cache.threads) == 2
    assert threading.get_ident() not in cache.threads
