"""Planar polygon geometry on (lng, lat) vertices.

Rings and polygons are built through ``from_coordinates`` which rejects
degenerate input with ``DegenerateGeometryError``. The query functions
(containment, area) never raise; empty or odd input yields ``False`` or
``0.0``. Areas are in square degrees, which is what the weighted sampler
compares against each other.
"""

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Tuple

from .errors import DegenerateGeometryError

Vertex = Tuple[float, float]  # (lng, lat)


@dataclass(frozen=True)
class Ring:
    """An open sequence of (lng, lat) vertices; the closing edge is implied."""

    vertices: Tuple[Vertex, ...]

    @classmethod
    def from_coordinates(cls, coordinates: Iterable[Sequence[float]]) -> "Ring":
        """Build a ring from a GeoJSON position list.

        A repeated closing vertex is dropped. Extra position members
        (altitude) are ignored.

        Raises:
            DegenerateGeometryError: If fewer than 3 distinct vertices remain
        """
        vertices = []
        try:
            for position in coordinates:
                vertices.append((float(position[0]), float(position[1])))
        except (TypeError, ValueError, IndexError) as e:
            raise DegenerateGeometryError(f"Malformed ring position: {e}")

        if len(vertices) > 1 and vertices[0] == vertices[-1]:
            vertices.pop()

        if len(set(vertices)) < 3:
            raise DegenerateGeometryError(f"Ring has {len(set(vertices))} distinct vertices, need at least 3")

        return cls(tuple(vertices))

    def __len__(self) -> int:
        return len(self.vertices)


@dataclass(frozen=True)
class Polygon:
    """An outer ring with zero or more hole rings."""

    outer: Ring
    holes: Tuple[Ring, ...] = field(default_factory=tuple)

    @classmethod
    def from_coordinates(cls, rings: Sequence[Iterable[Sequence[float]]]) -> "Polygon":
        """Build a polygon from GeoJSON ``Polygon`` coordinates.

        The first ring is the outer boundary; the rest are holes. Degenerate
        holes are dropped since they cover no area.

        Raises:
            DegenerateGeometryError: If there is no ring or the outer ring is degenerate
        """
        if not rings:
            raise DegenerateGeometryError("Polygon has no rings")

        outer = Ring.from_coordinates(rings[0])
        holes = []
        for hole in rings[1:]:
            try:
                holes.append(Ring.from_coordinates(hole))
            except DegenerateGeometryError:
                continue
        return cls(outer, tuple(holes))

    @classmethod
    def from_bounds(cls, north: float, south: float, east: float, west: float) -> "Polygon":
        """Rectangle polygon from its four edges."""
        return cls.from_coordinates([[
            (west, south),
            (east, south),
            (east, north),
            (west, north),
        ]])

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """(north, south, east, west) of the outer ring."""
        lngs = [lng for lng, _ in self.outer.vertices]
        lats = [lat for _, lat in self.outer.vertices]
        return max(lats), min(lats), max(lngs), min(lngs)


def point_in_ring(lat: float, lng: float, ring: Ring) -> bool:
    """Even-odd ray casting test of a point against a single ring."""
    vertices = ring.vertices
    n = len(vertices)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i]
        xj, yj = vertices[j]
        if (yi > lat) != (yj > lat):
            x_cross = (xj - xi) * (lat - yi) / (yj - yi) + xi
            if lng < x_cross:
                inside = not inside
        j = i
    return inside


def point_in_polygon(lat: float, lng: float, polygon: Polygon) -> bool:
    """True if the point is inside the outer ring and inside none of the holes."""
    if not point_in_ring(lat, lng, polygon.outer):
        return False
    for hole in polygon.holes:
        if point_in_ring(lat, lng, hole):
            return False
    return True


def ring_area(ring: Ring) -> float:
    """Absolute shoelace area of a ring."""
    vertices = ring.vertices
    n = len(vertices)
    if n < 3:
        return 0.0

    twice_area = 0.0
    for i in range(n):
        x1, y1 = vertices[i]
        x2, y2 = vertices[(i + 1) % n]
        twice_area += x1 * y2 - x2 * y1
    return abs(twice_area) / 2.0


def polygon_area(polygon: Polygon) -> float:
    """Outer ring area minus hole areas, never negative."""
    area = ring_area(polygon.outer) - sum(ring_area(hole) for hole in polygon.holes)
    return max(area, 0.0)
