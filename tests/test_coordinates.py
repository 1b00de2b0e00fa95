import random

import pytest

from streetroam.coordinates import (
    METHOD_BOUNDS,
    METHOD_FALLBACK,
    METHOD_POLYGON,
    generate_random_coordinates_in_bounds,
    sample_in_polygon,
    sample_point,
)
from streetroam.geometry import Polygon, point_in_polygon
from streetroam.regions import Bounds, BoundaryRegion


def test_coordinates_in_bounds(rng):
    bounds = Bounds(north=51.7, south=51.3, east=0.2, west=-0.5)
    for _ in range(500):
        lat, lng = generate_random_coordinates_in_bounds(bounds, rng)
        assert bounds.contains(lat, lng)


def test_region_without_geometry_uses_bounds(rng):
    region = BoundaryRegion(Bounds(north=10, south=5, east=3, west=1))
    point = sample_point(region, rng)
    assert point.method == METHOD_BOUNDS
    assert region.bounds.contains(point.latitude, point.longitude)


def test_polygon_samples_respect_holes(rng):
    polygon = Polygon.from_coordinates([
        [[0, 0], [10, 0], [10, 10], [0, 10]],
        [[2, 2], [8, 2], [8, 8], [2, 8]],
    ])
    region = BoundaryRegion.from_polygon(polygon)
    for _ in range(500):
        point = sample_point(region, rng)
        assert point.method == METHOD_POLYGON
        assert point_in_polygon(point.latitude, point.longitude, polygon)
        assert not (2 < point.latitude < 8 and 2 < point.longitude < 8)


def test_triangle_rejection_sampling_stays_inside(rng):
    triangle = Polygon.from_coordinates([[[0, 0], [10, 0], [0, 10]]])
    for _ in range(500):
        lat, lng = sample_in_polygon(triangle, rng)
        assert lat + lng <= 10


def test_exhaustion_returns_none():
    # A diagonal sliver covering almost none of its bounding box
    sliver = Polygon.from_coordinates([[[0, 0], [100, 100], [99.999, 100]]])
    assert sample_in_polygon(sliver, random.Random(0), max_attempts=5) is None


def test_exhaustion_falls_back_to_region_bounds_and_is_tagged():
    sliver = Polygon.from_coordinates([[[0, 0], [100, 100], [99.999, 100]]])
    region = BoundaryRegion(Bounds(north=20, south=10, east=50, west=40), polygons=[sliver])
    point = sample_point(region, random.Random(0), max_attempts=3)
    assert point.method == METHOD_FALLBACK
    assert region.bounds.contains(point.latitude, point.longitude)


def test_polygon_chosen_uniformly(rng):
    west = Polygon.from_bounds(north=1, south=0, east=1, west=0)
    east = Polygon.from_bounds(north=1, south=0, east=101, west=100)
    region = BoundaryRegion(Bounds(north=1, south=0, east=101, west=0), polygons=[west, east])
    draws = [sample_point(region, rng).longitude for _ in range(4000)]
    west_share = sum(1 for lng in draws if lng < 50) / len(draws)
    assert west_share == pytest.approx(0.5, abs=0.05)


def test_polygon_hit_rate_is_measurable(rng):
    square = Polygon.from_bounds(north=10, south=0, east=10, west=0)
    region = BoundaryRegion.from_polygon(square)
    methods = [sample_point(region, rng).method for _ in range(200)]
    assert methods.count(METHOD_POLYGON) == 200


def test_seeded_sampling_is_reproducible():
    region = BoundaryRegion.from_polygon(Polygon.from_coordinates([[[0, 0], [10, 0], [0, 10]]]))
    first = [sample_point(region, random.Random(99)) for _ in range(3)]
    second = [sample_point(region, random.Random(99)) for _ in range(3)]
    assert first == second
