import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from nearby_poi.core.logger import logs
from nearby_poi.models.poi_model import CacheEntry, POI, utc_now


class POICacheRepository:
    """
    In-memory POI cache keyed by grid cell, categories and radius.
    Lives as long as the service instance that owns it; nothing is persisted.
    """

    def __init__(self, ttl: timedelta = timedelta(minutes=15), clock: Callable[[], datetime] = utc_now):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get_fresh(self, key: str) -> Optional[CacheEntry]:
        """Returns the entry only if it has not expired yet."""
        entry = self._entries.get(key)
        if entry and entry.expires_at > self._clock():
            return entry
        return None

    def get_any(self, key: str) -> Optional[CacheEntry]:
        """Returns the entry even past expiry; used as a last-resort fallback."""
        return self._entries.get(key)

    def save(self, key: str, pois: List[POI], categories: List[str]) -> CacheEntry:
        now = self._clock()
        entry = CacheEntry(
            key=key,
            pois=[poi.model_copy(deep=True) for poi in pois],
            categories=list(categories),
            timestamp=now,
            expires_at=now + self.ttl,
        )
        self._entries[key] = entry
        return entry

    def clear_expired(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            logs.log(logging.INFO, f"Removed {len(expired)} expired POI cache entries")
        return len(expired)

    def clear_all(self) -> None:
        self._entries.clear()
        logs.log(logging.INFO, "POI cache cleared")

    def __len__(self) -> int:
        return len(self._entries)
