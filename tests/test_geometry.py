import pytest

from streetroam.errors import DegenerateGeometryError
from streetroam.geometry import (
    Polygon,
    Ring,
    point_in_polygon,
    point_in_ring,
    polygon_area,
    ring_area,
)

SQUARE = [[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]


@pytest.fixture
def square():
    return Polygon.from_coordinates([SQUARE])


@pytest.fixture
def square_with_hole():
    hole = [[4, 4], [6, 4], [6, 6], [4, 6], [4, 4]]
    return Polygon.from_coordinates([SQUARE, hole])


@pytest.mark.parametrize("lat,lng", [(5, 5), (0.1, 0.1), (9.9, 9.9), (1, 1), (9, 9), (2.5, 2.5)])
def test_points_inside_square(square, lat, lng):
    assert point_in_polygon(lat, lng, square)


@pytest.mark.parametrize("lat,lng", [(-1, 5), (11, 5), (5, -1), (5, 11)])
def test_points_outside_square(square, lat, lng):
    assert not point_in_polygon(lat, lng, square)


def test_point_in_hole_is_outside(square_with_hole):
    assert not point_in_polygon(5, 5, square_with_hole)


def test_point_between_hole_and_edge_is_inside(square_with_hole):
    assert point_in_polygon(2, 2, square_with_hole)
    assert point_in_polygon(5, 8, square_with_hole)


def test_concave_ring():
    # U shape opening to the north
    ring = Ring.from_coordinates([[0, 0], [3, 0], [3, 3], [2, 3], [2, 1], [1, 1], [1, 3], [0, 3]])
    assert point_in_ring(2, 0.5, ring)
    assert not point_in_ring(2, 1.5, ring)
    assert point_in_ring(2, 2.5, ring)


def test_ring_uses_lng_lat_order():
    # Tall thin rectangle: lng 0..1, lat 0..10
    ring = Ring.from_coordinates([[0, 0], [1, 0], [1, 10], [0, 10]])
    assert point_in_ring(5, 0.5, ring)
    assert not point_in_ring(0.5, 5, ring)


def test_ring_drops_closing_vertex():
    ring = Ring.from_coordinates(SQUARE)
    assert len(ring) == 4


def test_ring_ignores_altitude():
    ring = Ring.from_coordinates([[0, 0, 12], [1, 0, 3], [1, 1, 0]])
    assert ring.vertices == ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0))


@pytest.mark.parametrize("coords", [[], [[0, 0], [1, 1]], [[0, 0], [1, 1], [0, 0], [1, 1]], [["a", 0], [1, 1], [2, 2]]])
def test_degenerate_rings_rejected(coords):
    with pytest.raises(DegenerateGeometryError):
        Ring.from_coordinates(coords)


def test_polygon_without_rings_rejected():
    with pytest.raises(DegenerateGeometryError):
        Polygon.from_coordinates([])


def test_degenerate_hole_is_dropped():
    polygon = Polygon.from_coordinates([SQUARE, [[1, 1], [2, 2]]])
    assert polygon.holes == ()


def test_shoelace_area(square):
    assert ring_area(square.outer) == pytest.approx(100.0)
    assert polygon_area(square) == pytest.approx(100.0)


def test_area_is_orientation_independent():
    clockwise = Ring.from_coordinates(list(reversed(SQUARE)))
    assert ring_area(clockwise) == pytest.approx(100.0)


def test_area_subtracts_holes(square_with_hole):
    assert polygon_area(square_with_hole) == pytest.approx(96.0)


def test_triangle_area():
    ring = Ring.from_coordinates([[0, 0], [4, 0], [0, 3]])
    assert ring_area(ring) == pytest.approx(6.0)


def test_query_functions_tolerate_empty_rings():
    empty = Ring(())
    assert not point_in_ring(0, 0, empty)
    assert ring_area(empty) == 0.0


def test_extent(square_with_hole):
    assert square_with_hole.extent == (10.0, 0.0, 10.0, 0.0)


def test_from_bounds():
    polygon = Polygon.from_bounds(north=2, south=-2, east=5, west=1)
    assert polygon_area(polygon) == pytest.approx(16.0)
    assert polygon.extent == (2.0, -2.0, 5.0, 1.0)
