"""Time-expiring cache of land boundary regions built from GeoJSON collections."""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from .errors import DatasetError, DegenerateGeometryError, IndexUnavailable
from .geometry import Polygon
from .locking import ReadWriteLock
from .regions import BoundaryRegion, region_stats

logger = logging.getLogger(__name__)

DEFAULT_TTL = 3600.0

# Natural Earth writes -99 where a code is not assigned
_MISSING_CODES = {"", "-99", "-1"}


def _country_identity(properties: Optional[Dict[str, Any]]):
    """Return (name, code) from Natural Earth feature properties."""
    if not properties:
        return "", ""

    code = ""
    for key in ("ISO_A3", "ADM0_A3"):
        value = str(properties.get(key) or "").strip()
        if value not in _MISSING_CODES:
            code = value
            break

    name = ""
    for key in ("NAME", "ADMIN", "name"):
        value = str(properties.get(key) or "").strip()
        if value:
            name = value
            break

    return name, code


def _polygon_coordinates(geometry: Optional[Dict[str, Any]]) -> List[Any]:
    """Polygon coordinate arrays of a Polygon or MultiPolygon geometry."""
    if not geometry:
        return []
    geometry_type = geometry.get("type")
    coordinates = geometry.get("coordinates") or []
    if geometry_type == "Polygon":
        return [coordinates]
    if geometry_type == "MultiPolygon":
        return list(coordinates)
    return []


def extract_regions(feature_collection: Dict[str, Any], is_minor_island: bool = False) -> List[BoundaryRegion]:
    """Turn a FeatureCollection into one BoundaryRegion per polygon.

    A MultiPolygon country yields one region per constituent polygon so an
    archipelago is never weighted by one huge combined bounding box.
    Degenerate polygons, invalid boxes and polar regions are dropped.

    Args:
        feature_collection: Parsed GeoJSON FeatureCollection
        is_minor_island: Flag set on every region produced

    Returns:
        List of usable regions
    """
    regions = []
    skipped = 0

    for feature in feature_collection.get("features") or []:
        if not isinstance(feature, dict):
            continue
        name, code = _country_identity(feature.get("properties"))

        for rings in _polygon_coordinates(feature.get("geometry")):
            try:
                polygon = Polygon.from_coordinates(rings)
            except DegenerateGeometryError:
                skipped += 1
                continue

            region = BoundaryRegion.from_polygon(
                polygon,
                is_minor_island=is_minor_island,
                country_name=name,
                country_code=code,
            )
            if not region.bounds.is_valid() or region.is_polar():
                skipped += 1
                continue
            regions.append(region)

    if skipped:
        logger.debug("Skipped %d degenerate, invalid or polar polygons", skipped)
    return regions


class BoundaryIndex:
    """Lazily built, expiring list of land regions shared across threads.

    Args:
        provider: Object with load_world() and load_minor_islands() returning
            GeoJSON FeatureCollections (e.g. MapDataManager)
        ttl: Seconds a built index stays valid
        clock: Monotonic time source, injectable for tests
    """

    def __init__(self, provider, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.provider = provider
        self.ttl = ttl
        self._clock = clock
        self._lock = ReadWriteLock()
        self._regions: List[BoundaryRegion] = []
        self._built_at: Optional[float] = None

    @property
    def built_at(self) -> Optional[float]:
        return self._built_at

    def is_valid(self) -> bool:
        with self._lock.read_locked():
            return self._is_valid_unlocked()

    def _is_valid_unlocked(self) -> bool:
        if self._built_at is None or not self._regions:
            return False
        return self._clock() - self._built_at < self.ttl

    def get_regions(self) -> List[BoundaryRegion]:
        """Return the cached regions, rebuilding when empty or expired.

        Raises:
            IndexUnavailable: If the primary dataset cannot be loaded or has no usable regions
        """
        with self._lock.read_locked():
            if self._is_valid_unlocked():
                return self._regions

        with self._lock.write_locked():
            # Another thread may have rebuilt while we waited
            if self._is_valid_unlocked():
                return self._regions

            regions = self._build()
            self._regions = regions
            self._built_at = self._clock()
            return regions

    def clear(self) -> None:
        """Drop the cached regions so the next call rebuilds."""
        with self._lock.write_locked():
            self._regions = []
            self._built_at = None

    def stats(self) -> Dict[str, Any]:
        return region_stats(self.get_regions())

    def _build(self) -> List[BoundaryRegion]:
        started = time.perf_counter()

        try:
            world = self.provider.load_world()
        except DatasetError as e:
            raise IndexUnavailable(f"Primary boundary dataset unavailable: {e}") from e

        regions = extract_regions(world, is_minor_island=False)
        if not regions:
            raise IndexUnavailable("Primary boundary dataset yielded no usable regions")
        country_regions = len(regions)

        try:
            islands = self.provider.load_minor_islands()
        except DatasetError as e:
            logger.warning("Minor islands dataset unavailable, continuing without it: %s", e)
        else:
            regions.extend(extract_regions(islands, is_minor_island=True))

        logger.info(
            "Built boundary index: %d country regions, %d minor island regions in %.2fs",
            country_regions, len(regions) - country_regions, time.perf_counter() - started,
        )
        return regions
