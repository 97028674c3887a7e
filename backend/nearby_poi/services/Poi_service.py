import logging
from typing import List, Optional

from nearby_poi.core.config import settings
from nearby_poi.core.exceptions import POIError, POIFetchError, POISearchError
from nearby_poi.core.geo_utils import format_distance, grid_id, haversine_distance
from nearby_poi.core.logger import logs
from nearby_poi.core.rate_limiter import RateLimiter
from nearby_poi.models.poi_model import POI, Category, Coordinate, POISearchOptions, SearchResult
from nearby_poi.repos.poi_cache_repo import POICacheRepository
from nearby_poi.services import categories as catalog
from nearby_poi.services.element_parser import parse_elements
from nearby_poi.services.overpass_client import OverpassClient
from nearby_poi.services.overpass_query import build_nearby_query, build_search_query

class POIService:
    def __init__(
        self,
        repo: POICacheRepository,
        client: Optional[OverpassClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self.repo = repo
        self.client = client or OverpassClient()
        self.rate_limiter = rate_limiter or RateLimiter(settings.MIN_REQUEST_INTERVAL_SECONDS)

    async def get_nearby_pois(
        self, lat: float, lon: float, options: Optional[POISearchOptions] = None
    ) -> SearchResult:
        """
        Nearby lookup with grid caching and stale-cache fallback.

        The cache key covers grid cell, sorted categories and radius only;
        `limit` and `include_distance` are not part of it, so a cached list
        is served as stored by whichever call populated it.
        """
        options = options or POISearchOptions()
        radius = options.radius
        categories = sorted(options.categories)
        cache_key = self._cache_key(lat, lon, radius, categories)

        # 1. Check Cache
        cached = self.repo.get_fresh(cache_key)
        if cached is not None:
            logs.log(logging.INFO, f"✓ POI cache HIT for {cache_key} (valid until {cached.expires_at})")
            return self._search_result(cached.pois, lat, lon, radius, categories, "cached")

        logs.log(logging.INFO, f"✗ POI cache MISS for {cache_key}. Fetching from Overpass API...")

        try:
            # 2. Fetch from Overpass
            await self.rate_limiter.wait()
            query = build_nearby_query(lat, lon, radius, categories, timeout=settings.OVERPASS_QUERY_TIMEOUT)
            elements = await self.client.fetch_elements(query)
            pois = parse_elements(elements, categories)

            # 3. Distances, nearest first
            if options.include_distance:
                self._attach_distances(pois, lat, lon)
                pois.sort(key=lambda p: p.distance_value)

            # 4. Limit and cache
            limited = pois[:options.limit]
            self.repo.save(cache_key, limited, categories)

            logs.log(logging.INFO, f"Fetched {len(pois)} POIs, returning {len(limited)} for {cache_key}")
            return self._search_result(limited, lat, lon, radius, categories, "overpass")

        except Exception as e:
            logs.log(logging.ERROR, f"Nearby POI fetch failed: {str(e)}")

            # Fallback: serve stale cache rather than nothing
            stale = self.repo.get_any(cache_key)
            if stale is not None:
                logs.log(logging.WARNING, f"Serving stale POI cache for {cache_key} (expired {stale.expires_at})")
                return self._search_result(stale.pois, lat, lon, radius, categories, "cached")

            if isinstance(e, POIFetchError):
                raise
            raise POIFetchError(f"Failed to fetch POIs: {str(e)}") from e

    async def search_pois(
        self,
        query: str,
        lat: float,
        lon: float,
        radius: int = settings.DEFAULT_SEARCH_RADIUS_METERS,
    ) -> List[POI]:
        """Name search around a point. Never cached and never falls back."""
        if not query or not query.strip():
            raise POISearchError("Search failed: query must not be empty")

        try:
            await self.rate_limiter.wait()
            overpass_query = build_search_query(query.strip(), lat, lon, radius)
            elements = await self.client.fetch_elements(overpass_query)
            pois = parse_elements(elements, [catalog.ALL_CATEGORY_ID])

            self._attach_distances(pois, lat, lon)
            pois.sort(key=lambda p: p.distance_value)
        except POIError as e:
            logs.log(logging.ERROR, f"POI search for '{query}' failed: {e.message}")
            raise POISearchError(f"Search failed: {e.message}", cause=e) from e
        except Exception as e:
            logs.log(logging.ERROR, f"POI search for '{query}' failed: {str(e)}")
            raise POISearchError(f"Search failed: {str(e)}", cause=e) from e

        logs.log(logging.INFO, f"Search '{query}' returned {len(pois)} POIs")
        return pois

    def get_categories(self) -> List[Category]:
        return catalog.get_categories()

    def get_category_by_id(self, category_id: str) -> Optional[Category]:
        return catalog.get_category_by_id(category_id)

    def clear_expired_cache(self) -> int:
        return self.repo.clear_expired()

    def clear_all_cache(self) -> None:
        self.repo.clear_all()

    async def aclose(self) -> None:
        await self.client.aclose()

    def _cache_key(self, lat: float, lon: float, radius: int, categories: List[str]) -> str:
        cell = grid_id(lat, lon, radius, settings.GRID_SIZE_METERS)
        return f"{cell}-{','.join(categories)}-{radius}"

    def _attach_distances(self, pois: List[POI], lat: float, lon: float) -> None:
        for poi in pois:
            meters = haversine_distance(lat, lon, poi.latitude, poi.longitude)
            poi.distance = format_distance(meters)
            poi.distance_value = meters

    def _search_result(
        self,
        pois: List[POI],
        lat: float,
        lon: float,
        radius: int,
        categories: List[str],
        source: str,
    ) -> SearchResult:
        return SearchResult(
            # Callers get their own copies; cached entries stay untouched
            pois=[poi.model_copy(deep=True) for poi in pois],
            total_found=len(pois),
            search_radius=radius,
            search_center=Coordinate(latitude=lat, longitude=lon),
            categories=categories,
            source=source,
        )
