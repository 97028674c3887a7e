import math
from decimal import ROUND_HALF_UP, Decimal

EARTH_RADIUS_METERS = 6371e3
# Flat conversion used only for grid quantization, not for distances.
METERS_PER_DEGREE = 111_320


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two WGS84 points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def format_distance(meters: float) -> str:
    """Render a distance as "850m" below one kilometer and "1.2km" from there on."""
    # Ties round up ("12.5" -> "13m", "1.25" -> "1.3km"), not to even
    if meters < 1000:
        return f"{Decimal(str(meters)).quantize(Decimal('1'), ROUND_HALF_UP)}m"
    km = Decimal(str(meters / 1000)).quantize(Decimal("0.1"), ROUND_HALF_UP)
    return f"{km}km"


def grid_id(latitude: float, longitude: float, radius: int, grid_size: int = 500) -> str:
    """
    Quantizes a coordinate into a grid cell of ``grid_size`` meters and appends
    how many cells the radius spans. Nearby searches with the same radius band
    land in the same cell and share a cache entry.
    """
    cell_lat = math.floor(latitude * METERS_PER_DEGREE / grid_size)
    cell_lon = math.floor(longitude * METERS_PER_DEGREE / grid_size)
    radius_cells = math.ceil(radius / grid_size)
    return f"{cell_lat}-{cell_lon}-{radius_cells}"
