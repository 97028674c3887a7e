from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Literal, Optional
from enum import Enum
from datetime import datetime, timezone

from nearby_poi.core.config import settings


def utc_now() -> datetime:
    return datetime.now(timezone.utc)

# --- Enums ---
class POISource(str, Enum):
    OVERPASS = "overpass"  # fetched live from the backend
    CACHED = "cached"
    MANUAL = "manual"      # entered by hand, never produced by the fetch path

# --- Domain Models ---
class Category(BaseModel):
    id: str
    name: str       # Indonesian display name
    name_en: str
    icon: str
    overpass_query: str
    color: str
    priority: int

class Coordinate(BaseModel):
    latitude: float
    longitude: float

class POI(BaseModel):
    id: str  # "<element type>-<element id>"
    name: str
    category: Category
    latitude: float
    longitude: float
    address: Optional[str] = None
    tags: Dict[str, str] = {}
    source: POISource = POISource.OVERPASS
    last_updated: datetime = Field(default_factory=utc_now)
    distance: Optional[str] = None
    distance_value: Optional[float] = None  # meters

class POISearchOptions(BaseModel):
    radius: int = Field(default=settings.DEFAULT_RADIUS_METERS, gt=0)
    categories: List[str] = Field(default_factory=lambda: ["all"])
    limit: int = Field(default=settings.DEFAULT_LIMIT, ge=1)
    include_distance: bool = True

    @field_validator("categories")
    @classmethod
    def default_to_all(cls, value: List[str]) -> List[str]:
        return value or ["all"]

class SearchResult(BaseModel):
    pois: List[POI]
    total_found: int
    search_radius: int
    search_center: Coordinate
    categories: List[str]
    source: Literal["overpass", "cached"]
    timestamp: datetime = Field(default_factory=utc_now)

class CacheEntry(BaseModel):
    key: str
    pois: List[POI]
    categories: List[str]
    timestamp: datetime
    expires_at: datetime

# --- Overpass wire models ---
class OverpassCenter(BaseModel):
    lat: float
    lon: float

class OverpassElement(BaseModel):
    type: Literal["node", "way", "relation"]
    id: int
    lat: Optional[float] = None
    lon: Optional[float] = None
    center: Optional[OverpassCenter] = None
    tags: Dict[str, str] = {}
