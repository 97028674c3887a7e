import logging
import re
from typing import List

from nearby_poi.core.logger import logs
from nearby_poi.models.poi_model import Category
from nearby_poi.services.categories import ALL_CATEGORY_ID, POI_CATEGORIES, concrete_categories

_REGEX_SPECIALS = re.compile(r"([.*+?^${}()|\[\]\\])")


def escape_overpass_string(text: str) -> str:
    """
    Escapes user text for use inside a quoted Overpass regex filter.
    Regex metacharacters are escaped first, then the result is made safe as an
    Overpass string literal (backslashes and double quotes).
    """
    escaped = _REGEX_SPECIALS.sub(r"\\\1", text)
    return escaped.replace("\\", "\\\\").replace('"', '\\"')


def resolve_query_categories(categories: List[str]) -> List[Category]:
    """Categories to put in the backend query for a requested id list."""
    if ALL_CATEGORY_ID in categories:
        return concrete_categories()

    active = [cat for cat in POI_CATEGORIES if cat.id in categories]
    if not active:
        logs.log(logging.WARNING, f"No known category in {categories}, querying every category")
        return concrete_categories()
    return active


def build_nearby_query(
    latitude: float,
    longitude: float,
    radius: int,
    categories: List[str],
    timeout: int = 15,
) -> str:
    """Overpass QL selecting nodes and ways of the requested categories around a point."""
    around = f"(around:{radius},{latitude},{longitude})"
    parts = []
    for category in resolve_query_categories(categories):
        for element_type in ("node", "way"):
            parts.append(f"  {element_type}[{category.overpass_query}]{around};")

    body = "\n".join(parts)
    return f"[out:json][timeout:{timeout}];\n(\n{body}\n);\nout center;"


def build_search_query(
    query: str,
    latitude: float,
    longitude: float,
    radius: int,
    timeout: int = 10,
) -> str:
    """Overpass QL for a case-insensitive substring match on the name tag."""
    pattern = escape_overpass_string(query)
    around = f"(around:{radius},{latitude},{longitude})"
    return (
        f"[out:json][timeout:{timeout}];\n"
        "(\n"
        f'  node["name"~"{pattern}",i]{around};\n'
        f'  way["name"~"{pattern}",i]{around};\n'
        ");\n"
        "out center;"
    )
