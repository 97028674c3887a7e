"""
Static POI category catalog and the tag classifier that maps raw Overpass
tags onto it.
"""
from typing import Callable, Dict, List, Optional, Tuple

from nearby_poi.models.poi_model import Category

ALL_CATEGORY_ID = "all"

# Indonesian POI categories, in display order
POI_CATEGORIES: List[Category] = [
    Category(
        id=ALL_CATEGORY_ID,
        name="Semua",
        name_en="All",
        icon="explore",
        overpass_query="",
        color="#6C7B7F",
        priority=0,
    ),
    Category(
        id="restaurant",
        name="Rumah Makan",
        name_en="Restaurant",
        icon="restaurant-menu",
        overpass_query='amenity~"^(restaurant|food_court|fast_food|cafe)$"',
        color="#FF6B6B",
        priority=1,
    ),
    Category(
        id="school",
        name="Sekolah",
        name_en="School",
        icon="school",
        overpass_query='amenity~"^(school|university|college|kindergarten)$"',
        color="#4ECDC4",
        priority=2,
    ),
    Category(
        id="hospital",
        name="Rumah Sakit",
        name_en="Hospital",
        icon="local-hospital",
        overpass_query='amenity~"^(hospital|clinic|pharmacy|doctors)$"',
        color="#FF4757",
        priority=3,
    ),
    Category(
        id="mosque",
        name="Masjid",
        name_en="Mosque",
        icon="place",
        overpass_query='amenity="place_of_worship"][religion="muslim"',
        color="#2ECC71",
        priority=4,
    ),
    Category(
        id="atm",
        name="ATM",
        name_en="ATM",
        icon="payment",
        overpass_query='amenity="atm"',
        color="#3498DB",
        priority=5,
    ),
    Category(
        id="gas_station",
        name="SPBU",
        name_en="Gas Station",
        icon="local-gas-station",
        overpass_query='amenity="fuel"',
        color="#E74C3C",
        priority=6,
    ),
    Category(
        id="shopping",
        name="Belanja",
        name_en="Shopping",
        icon="shopping-bag",
        overpass_query='shop~"^(supermarket|mall|convenience|department_store)$"',
        color="#9B59B6",
        priority=7,
    ),
    Category(
        id="bank",
        name="Bank",
        name_en="Bank",
        icon="account-balance",
        overpass_query='amenity="bank"',
        color="#F39C12",
        priority=8,
    ),
]

_CATEGORIES_BY_ID: Dict[str, Category] = {cat.id: cat for cat in POI_CATEGORIES}


def get_categories() -> List[Category]:
    return list(POI_CATEGORIES)


def get_category_by_id(category_id: str) -> Optional[Category]:
    return _CATEGORIES_BY_ID.get(category_id)


def concrete_categories() -> List[Category]:
    """Every category except the "all" wildcard."""
    return [cat for cat in POI_CATEGORIES if cat.id != ALL_CATEGORY_ID]


def _tag_in(key: str, values: set) -> Callable[[Dict[str, str]], bool]:
    return lambda tags: tags.get(key) in values


def _tag_is(key: str, value: str) -> Callable[[Dict[str, str]], bool]:
    return lambda tags: tags.get(key) == value


def _all_of(*predicates: Callable[[Dict[str, str]], bool]) -> Callable[[Dict[str, str]], bool]:
    return lambda tags: all(predicate(tags) for predicate in predicates)


# Decision list: evaluated top to bottom, the first matching rule wins.
CATEGORY_RULES: List[Tuple[Callable[[Dict[str, str]], bool], str]] = [
    (_tag_in("amenity", {"restaurant", "food_court", "fast_food", "cafe"}), "restaurant"),
    (_tag_in("amenity", {"school", "university", "college", "kindergarten"}), "school"),
    (_tag_in("amenity", {"hospital", "clinic", "pharmacy", "doctors"}), "hospital"),
    (_all_of(_tag_is("amenity", "place_of_worship"), _tag_is("religion", "muslim")), "mosque"),
    (_tag_is("amenity", "atm"), "atm"),
    (_tag_is("amenity", "fuel"), "gas_station"),
    (_tag_in("shop", {"supermarket", "mall", "convenience", "department_store"}), "shopping"),
    (_tag_is("amenity", "bank"), "bank"),
]


def determine_category(tags: Dict[str, str]) -> Optional[Category]:
    """Classify raw element tags. Returns None when no rule matches."""
    for predicate, category_id in CATEGORY_RULES:
        if predicate(tags):
            return _CATEGORIES_BY_ID[category_id]
    return None
