import pytest

from nearby_poi.core.geo_utils import format_distance, grid_id, haversine_distance


def test_haversine_zero_distance():
    assert haversine_distance(-6.2088, 106.8456, -6.2088, 106.8456) == 0


def test_haversine_one_degree_latitude():
    # 1 degree of latitude on a 6371 km sphere is ~111.195 km
    assert haversine_distance(0, 0, 1, 0) == pytest.approx(111_195, rel=1e-3)


def test_haversine_jakarta_to_bandung():
    dist = haversine_distance(-6.2088, 106.8456, -6.9175, 107.6191)
    assert 115_000 < dist < 120_000


def test_haversine_is_symmetric():
    a = haversine_distance(-6.2, 106.8, -6.3, 106.9)
    b = haversine_distance(-6.3, 106.9, -6.2, 106.8)
    assert a == pytest.approx(b)


@pytest.mark.parametrize(
    "meters, expected",
    [
        (0, "0m"),
        (12.4, "12m"),
        (999.4, "999m"),
        (1000, "1.0km"),
        (1049, "1.0km"),
        (1260, "1.3km"),
        (2.5, "3m"),
        (12.5, "13m"),
        (1250, "1.3km"),
        (3250, "3.3km"),
        (15_432, "15.4km"),
    ],
)
def test_format_distance(meters, expected):
    assert format_distance(meters) == expected


def test_format_distance_monotonic_within_band():
    meters = [format_distance(m) for m in range(0, 1000, 7)]
    values = [int(text[:-1]) for text in meters]
    assert values == sorted(values)

    km = [float(format_distance(m)[:-2]) for m in range(1000, 20_000, 37)]
    assert km == sorted(km)


def test_grid_id_shared_by_nearby_points():
    assert grid_id(-6.20880, 106.84560, 1000) == grid_id(-6.20881, 106.84561, 1000)


def test_grid_id_differs_across_cells():
    # ~1.1 km apart, more than two 500 m cells
    assert grid_id(-6.2088, 106.8456, 1000) != grid_id(-6.2188, 106.8456, 1000)


def test_grid_id_includes_radius_band():
    assert grid_id(-6.2088, 106.8456, 1000).endswith("-2")
    assert grid_id(-6.2088, 106.8456, 1001).endswith("-3")
    assert grid_id(-6.2088, 106.8456, 500, grid_size=250).endswith("-2")
