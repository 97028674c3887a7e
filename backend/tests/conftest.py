import os
from datetime import datetime, timedelta, timezone

# Keep test runs from writing rotating log files
os.environ.setdefault("LOG_TO_FILE", "false")

import httpx
import pytest

from nearby_poi.core.rate_limiter import RateLimiter
from nearby_poi.repos.poi_cache_repo import POICacheRepository
from nearby_poi.services.Poi_service import POIService
from nearby_poi.services.overpass_client import OverpassClient

JAKARTA = (-6.2088, 106.8456)


class FakeClock:
    """Settable wall clock for cache expiry tests."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class FakeTimer:
    """Monotonic clock whose sleep() only moves time forward."""

    def __init__(self):
        self.now = 1000.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeOverpass:
    """httpx MockTransport handler that records queries and replays a payload."""

    def __init__(self, elements=None, status_code: int = 200):
        self.elements = elements or []
        self.status_code = status_code
        self.error: Exception | None = None
        self.queries: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        form = httpx.QueryParams(request.content.decode())
        self.queries.append(form.get("data"))
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json={"elements": self.elements})

    @property
    def calls(self) -> int:
        return len(self.queries)


def node(element_id: int, lat: float, lon: float, **tags) -> dict:
    return {"type": "node", "id": element_id, "lat": lat, "lon": lon, "tags": tags}


def way(element_id: int, lat: float, lon: float, **tags) -> dict:
    return {"type": "way", "id": element_id, "center": {"lat": lat, "lon": lon}, "tags": tags}


def jakarta_elements() -> list[dict]:
    lat, lon = JAKARTA
    return [
        node(1, lat + 0.004, lon, amenity="restaurant", name="Warung Padang Sederhana"),
        node(2, lat + 0.001, lon, amenity="cafe", name="Kopi Kenangan"),
        node(3, lat, lon + 0.0005, amenity="atm", operator="Bank Mandiri"),
        way(4, lat - 0.002, lon, amenity="fast_food", brand="KFC"),
        node(5, lat, lon + 0.0001, amenity="bench"),
        {"type": "node", "id": 6, "tags": {"amenity": "restaurant"}},
    ]


@pytest.fixture
def fake_overpass() -> FakeOverpass:
    return FakeOverpass(jakarta_elements())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def service(fake_overpass, clock, timer) -> POIService:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_overpass))
    return POIService(
        POICacheRepository(clock=clock),
        client=OverpassClient(url="https://overpass.test/api/interpreter", client=http_client),
        rate_limiter=RateLimiter(1.0, clock=timer.monotonic, sleep=timer.sleep),
    )
