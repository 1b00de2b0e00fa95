"""Coordinate generation inside boundary regions."""

import random
from dataclasses import dataclass
from typing import Optional, Tuple

from .geometry import Polygon, point_in_polygon
from .regions import Bounds, BoundaryRegion

MAX_POLYGON_ATTEMPTS = 100

# SampledPoint.method values
METHOD_BOUNDS = "bounds"
METHOD_POLYGON = "polygon"
METHOD_FALLBACK = "fallback"


@dataclass(frozen=True)
class SampledPoint:
    """A candidate coordinate and how it was produced.

    method is "bounds" for regions without geometry, "polygon" for a
    rejection-sampling hit, and "fallback" when rejection sampling gave up
    and the region's bounding box was used instead.
    """

    latitude: float
    longitude: float
    method: str

    @property
    def coordinates(self) -> Tuple[float, float]:
        return self.latitude, self.longitude


def generate_random_coordinates_in_bounds(bounds: Bounds, rng=None) -> Tuple[float, float]:
    """Generate random coordinates within specified bounds.

    Args:
        bounds: Box to sample from
        rng: random.Random-like source; the random module when None

    Returns:
        Tuple of (latitude, longitude)
    """
    rng = rng or random
    latitude = rng.uniform(bounds.south, bounds.north)
    longitude = rng.uniform(bounds.west, bounds.east)
    return latitude, longitude


def sample_in_polygon(
    polygon: Polygon, rng=None, max_attempts: int = MAX_POLYGON_ATTEMPTS
) -> Optional[Tuple[float, float]]:
    """Rejection-sample a point inside a polygon.

    Draws from the polygon's own bounding box and keeps the first point
    that passes the containment test (holes excluded).

    Returns:
        (latitude, longitude), or None if every attempt missed
    """
    rng = rng or random
    north, south, east, west = polygon.extent
    for _ in range(max_attempts):
        lat = rng.uniform(south, north)
        lng = rng.uniform(west, east)
        if point_in_polygon(lat, lng, polygon):
            return lat, lng
    return None


def sample_point(region: BoundaryRegion, rng=None, max_attempts: int = MAX_POLYGON_ATTEMPTS) -> SampledPoint:
    """Draw a random coordinate inside a region.

    Regions with polygons use rejection sampling against one randomly chosen
    polygon; if that runs out of attempts the region's bounding box is used,
    accepting a little water over blocking generation.
    """
    rng = rng or random
    if not region.polygons:
        lat, lng = generate_random_coordinates_in_bounds(region.bounds, rng)
        return SampledPoint(lat, lng, METHOD_BOUNDS)

    polygon = rng.choice(region.polygons)
    hit = sample_in_polygon(polygon, rng, max_attempts)
    if hit is not None:
        return SampledPoint(hit[0], hit[1], METHOD_POLYGON)

    lat, lng = generate_random_coordinates_in_bounds(region.bounds, rng)
    return SampledPoint(lat, lng, METHOD_FALLBACK)
