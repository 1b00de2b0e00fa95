"""Region data model: bounding boxes, boundary regions and user preferences."""

import math
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .geometry import Polygon, polygon_area

MINOR_ISLAND_MULTIPLIER = 1.2
POLAR_CUTOFF_LATITUDE = -60.0
UNKNOWN_COUNTRY = "UNKNOWN"

# Preference rectangles coming from user interests
MAX_PREFERENCE_REGIONS = 10
MAX_PREFERENCE_LAT_SPAN = 89.0
MAX_PREFERENCE_LNG_SPAN = 179.0


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned box in degrees."""

    north: float
    south: float
    east: float
    west: float

    def is_valid(self) -> bool:
        """north > south, east > west, and all edges within legal ranges."""
        values = (self.north, self.south, self.east, self.west)
        if any(math.isnan(v) for v in values):
            return False
        if not (-90 <= self.south < self.north <= 90):
            return False
        if not (-180 <= self.west < self.east <= 180):
            return False
        return True

    @property
    def width(self) -> float:
        return self.east - self.west

    @property
    def height(self) -> float:
        return self.north - self.south

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, lat: float, lng: float) -> bool:
        return self.south <= lat <= self.north and self.west <= lng <= self.east

    def to_dict(self) -> Dict[str, float]:
        return {"north": self.north, "south": self.south, "east": self.east, "west": self.west}


WORLD_FALLBACK_BOUNDS = Bounds(north=85.0, south=-85.0, east=180.0, west=-180.0)


@dataclass(eq=False)
class BoundaryRegion:
    """One sampling unit: a bounding box, optional polygons, and country identity.

    Compared by identity so regions can be counted in dicts and sets.
    Area and weight are computed once; polygons are not changed after
    construction.
    """

    bounds: Bounds
    polygons: List[Polygon] = field(default_factory=list)
    is_minor_island: bool = False
    country_name: str = ""
    country_code: str = ""

    @property
    def country_key(self) -> str:
        """Grouping key for the country stage of weighted selection."""
        return self.country_code or self.country_name or UNKNOWN_COUNTRY

    @property
    def has_geometry(self) -> bool:
        return bool(self.polygons)

    @cached_property
    def area(self) -> float:
        """True polygon area, or the bounding-box area when there is no geometry."""
        if not self.polygons:
            return self.bounds.area
        return sum(polygon_area(polygon) for polygon in self.polygons)

    @cached_property
    def weight(self) -> float:
        """Sampling weight within a country bucket."""
        if self.is_minor_island:
            return self.area * MINOR_ISLAND_MULTIPLIER
        return self.area

    def is_polar(self) -> bool:
        """True for regions lying wholly in the excluded southern polar band."""
        return self.bounds.north < POLAR_CUTOFF_LATITUDE

    @classmethod
    def from_polygon(
        cls,
        polygon: Polygon,
        is_minor_island: bool = False,
        country_name: str = "",
        country_code: str = "",
    ) -> "BoundaryRegion":
        north, south, east, west = polygon.extent
        return cls(
            bounds=Bounds(north=north, south=south, east=east, west=west),
            polygons=[polygon],
            is_minor_island=is_minor_island,
            country_name=country_name,
            country_code=country_code,
        )


def world_fallback_region() -> BoundaryRegion:
    """Region used when there is nothing else to sample from."""
    return BoundaryRegion(bounds=WORLD_FALLBACK_BOUNDS)


@dataclass(frozen=True)
class PreferenceRegion:
    """A caller-chosen rectangle with an opaque label."""

    north: float
    south: float
    east: float
    west: float
    label: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PreferenceRegion":
        """Accept {"north", ...} or {"coordinates": {"north", ...}, "region_info": ...}.

        Raises:
            ValueError: If a coordinate is missing or not a number
        """
        coords = data.get("coordinates", data)
        label = data.get("region_info", data.get("label", "")) or ""
        try:
            return cls(
                north=float(coords["north"]),
                south=float(coords["south"]),
                east=float(coords["east"]),
                west=float(coords["west"]),
                label=str(label),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid preference region {data!r}: {e}")

    @property
    def bounds(self) -> Bounds:
        return Bounds(north=self.north, south=self.south, east=self.east, west=self.west)

    def to_region(self) -> BoundaryRegion:
        """Synthetic region whose single polygon is this rectangle, with no country."""
        return BoundaryRegion(
            bounds=self.bounds,
            polygons=[Polygon.from_bounds(self.north, self.south, self.east, self.west)],
        )


def _is_acceptable_preference(pref: PreferenceRegion) -> bool:
    if not (-90 <= pref.north <= 90 and -90 <= pref.south <= 90):
        return False
    if not (-180 <= pref.east <= 180 and -180 <= pref.west <= 180):
        return False
    if not pref.bounds.is_valid():
        return False
    if pref.north - pref.south > MAX_PREFERENCE_LAT_SPAN:
        return False
    if abs(pref.east - pref.west) > MAX_PREFERENCE_LNG_SPAN:
        return False
    return True


def validate_preferences(preferences: Sequence[PreferenceRegion]) -> List[PreferenceRegion]:
    """Check a list of interest rectangles and keep the usable ones.

    Args:
        preferences: Rectangles derived from a user's interest

    Returns:
        The rectangles that pass the range and size checks

    Raises:
        ValueError: If the list is empty, too long, or nothing in it is usable
    """
    if not preferences:
        raise ValueError("Preference region list is empty")
    if len(preferences) > MAX_PREFERENCE_REGIONS:
        raise ValueError(f"Too many preference regions: {len(preferences)} > {MAX_PREFERENCE_REGIONS}")

    valid = [pref for pref in preferences if _is_acceptable_preference(pref)]
    if not valid:
        raise ValueError("No valid preference regions")
    return valid


@dataclass
class ValidatedLocation:
    """A point confirmed by the imagery oracle, or the hardcoded fallback."""

    latitude: float
    longitude: float
    imagery_id: str
    is_fallback: bool = False
    candidate: Optional[Tuple[float, float]] = None
    # Camera heading from the panorama toward the candidate point
    heading: Optional[float] = None
    tier: str = "fallback"

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "imagery_id": self.imagery_id,
            "is_fallback": self.is_fallback,
            "tier": self.tier,
            "heading": self.heading,
        }
        if self.candidate is not None:
            result["candidate_latitude"], result["candidate_longitude"] = self.candidate
        return result


def region_stats(regions: Sequence[BoundaryRegion]) -> Dict[str, Any]:
    """Summary statistics over a region list (areas in square degrees).

    Args:
        regions: Regions to summarise

    Returns:
        Dictionary with counts and min/avg/max of area, width and height
    """
    stats: Dict[str, Any] = {
        "total_regions": len(regions),
        "minor_island_regions": sum(1 for r in regions if r.is_minor_island),
        "countries": len({r.country_key for r in regions}),
    }
    if not regions:
        return stats

    areas = [r.area for r in regions]
    widths = [r.bounds.width for r in regions]
    heights = [r.bounds.height for r in regions]
    total_area = sum(areas)
    stats.update({
        "total_area": total_area,
        "avg_area": total_area / len(regions),
        "min_area": min(areas),
        "max_area": max(areas),
        "min_width": min(widths),
        "max_width": max(widths),
        "min_height": min(heights),
        "max_height": max(heights),
    })
    return stats
