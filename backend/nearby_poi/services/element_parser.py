"""Turns raw Overpass elements into categorized POIs."""
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from nearby_poi.core.logger import logs
from nearby_poi.models.poi_model import POI, Category, OverpassElement, POISource
from nearby_poi.services.categories import ALL_CATEGORY_ID, determine_category

# Tried left to right; the first non-empty tag becomes the POI name.
NAME_TAGS: Tuple[str, ...] = ("name", "name:id", "name:ms", "brand", "operator")

# (tag, template) pairs joined with ", " in this order when present.
ADDRESS_TAGS: Tuple[Tuple[str, str], ...] = (
    ("addr:street", "{}"),
    ("addr:housenumber", "No. {}"),
    ("addr:suburb", "{}"),
    ("addr:city", "{}"),
    ("addr:state", "{}"),
)


def element_coordinates(element: OverpassElement) -> Optional[Tuple[float, float]]:
    if element.type == "node" and element.lat is not None and element.lon is not None:
        return element.lat, element.lon
    if element.center is not None:
        return element.center.lat, element.center.lon
    return None


def resolve_name(tags: Dict[str, str], category: Category, lat: float, lon: float) -> str:
    for tag in NAME_TAGS:
        value = (tags.get(tag) or "").strip()
        if value:
            return value
    return f"{category.name} di {lat:.4f}, {lon:.4f}"


def build_address(tags: Dict[str, str], category: Category, lat: float, lon: float) -> str:
    parts = [
        template.format(tags[tag].strip())
        for tag, template in ADDRESS_TAGS
        if (tags.get(tag) or "").strip()
    ]
    if parts:
        return ", ".join(parts)
    return f"{category.name}, {lat:.4f}, {lon:.4f}"


def element_to_poi(element: OverpassElement, requested_categories: List[str]) -> Optional[POI]:
    """
    Converts one element, or returns None when it has no usable coordinates,
    matches no category, or falls outside the requested categories.
    """
    coords = element_coordinates(element)
    if coords is None:
        return None
    lat, lon = coords

    category = determine_category(element.tags)
    if category is None:
        return None

    if ALL_CATEGORY_ID not in requested_categories and category.id not in requested_categories:
        return None

    return POI(
        id=f"{element.type}-{element.id}",
        name=resolve_name(element.tags, category, lat, lon),
        category=category,
        latitude=lat,
        longitude=lon,
        address=build_address(element.tags, category, lat, lon),
        tags=element.tags,
        source=POISource.OVERPASS,
    )


def parse_elements(raw_elements: List[Any], requested_categories: List[str]) -> List[POI]:
    """Converts every element it can; malformed ones are skipped, never raised."""
    pois: List[POI] = []
    skipped = 0

    for raw in raw_elements:
        try:
            element = OverpassElement.model_validate(raw)
        except ValidationError as e:
            skipped += 1
            logs.log(logging.DEBUG, f"Skipping malformed Overpass element: {e.error_count()} error(s)")
            continue

        poi = element_to_poi(element, requested_categories)
        if poi is not None:
            pois.append(poi)

    if skipped:
        logs.log(logging.INFO, f"Skipped {skipped} malformed element(s) out of {len(raw_elements)}")
    return pois
