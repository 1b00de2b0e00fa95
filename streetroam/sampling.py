"""Main sampling functions: random land coordinates with confirmed imagery."""

import logging
import threading
import time
from typing import List, Optional, Sequence

from .boundary_index import BoundaryIndex
from .config import Settings
from .coordinates import MAX_POLYGON_ATTEMPTS, SampledPoint, sample_point
from .map_data import MapDataManager
from .regions import PreferenceRegion, ValidatedLocation
from .resolver import Oracle, find_valid_point
from .selection import select_region, select_source
from .streetview import StreetViewOracle

logger = logging.getLogger(__name__)


class LocationSampler:
    """Region selection, point generation and imagery validation in one place.

    Args:
        index: BoundaryIndex used for world sampling
        oracle: Callable (lat, lng, radius) -> ImageryMatch or None
        rng: random.Random-like source; the random module when None
        strict_index: If True, world sampling raises IndexUnavailable when the
            index cannot be built; otherwise it samples from world bounds
        oracle_retries: Same-radius retries after an oracle transport failure
        max_attempts: Rejection sampling budget per point
    """

    def __init__(
        self,
        index: BoundaryIndex,
        oracle: Oracle,
        rng=None,
        strict_index: bool = True,
        oracle_retries: int = 1,
        max_attempts: int = MAX_POLYGON_ATTEMPTS,
    ):
        self.index = index
        self.oracle = oracle
        self.rng = rng
        self.strict_index = strict_index
        self.oracle_retries = oracle_retries
        self.max_attempts = max_attempts

    def generate_candidate(self, preferences: Optional[Sequence[PreferenceRegion]] = None) -> SampledPoint:
        """Sample an unvalidated coordinate.

        Raises:
            IndexUnavailable: For world sampling when the index cannot be built and strict_index is set
        """
        regions = select_source(preferences, self.index, strict=self.strict_index)
        region = select_region(regions, self.rng)
        point = sample_point(region, self.rng, self.max_attempts)
        logger.debug(
            "Sampled candidate (%.6f, %.6f) via %s from %s",
            point.latitude, point.longitude, point.method, region.country_key,
        )
        return point

    def generate_validated_location(
        self, preferences: Optional[Sequence[PreferenceRegion]] = None
    ) -> ValidatedLocation:
        """Sample a coordinate and resolve it to a location with imagery.

        Never fails for lack of imagery: the resolver ends in a fixed fallback.

        Args:
            preferences: Interest rectangles; None or empty samples the whole world

        Returns:
            ValidatedLocation carrying the oracle's coordinate and pano id

        Raises:
            IndexUnavailable: For world sampling when the index cannot be built and strict_index is set
        """
        point = self.generate_candidate(preferences)
        return find_valid_point(
            point.latitude,
            point.longitude,
            has_narrow_preference=bool(preferences),
            is_in_radius=self.oracle,
            retries=self.oracle_retries,
        )

    def sample_many(
        self, count: int, preferences: Optional[Sequence[PreferenceRegion]] = None
    ) -> List[ValidatedLocation]:
        """Generate count validated locations one after another."""
        return [self.generate_validated_location(preferences) for _ in range(count)]

    def sample_batches(
        self,
        count: int,
        preferences: Optional[Sequence[PreferenceRegion]] = None,
        batch_size: int = 10,
        delay: float = 2.0,
    ) -> List[ValidatedLocation]:
        """Generate locations in batches, pausing between them to avoid rate limiting.

        Args:
            count: Total number of locations
            preferences: Interest rectangles shared by every draw
            batch_size: Locations per batch
            delay: Seconds to wait between batches

        Returns:
            List of all generated locations
        """
        locations: List[ValidatedLocation] = []
        for start in range(0, count, batch_size):
            batch_count = min(batch_size, count - start)
            logger.info("Sampling batch %d: %d locations", start // batch_size + 1, batch_count)
            locations.extend(self.sample_many(batch_count, preferences))

            if start + batch_size < count and delay > 0:
                time.sleep(delay)
        return locations


def create_sampler(settings: Optional[Settings] = None, rng=None) -> LocationSampler:
    """Build a sampler backed by the local map data and the Street View API.

    Raises:
        ValueError: If GOOGLE_MAPS_API_KEY environment variable is not set
    """
    settings = settings or Settings.from_env()
    provider = MapDataManager(settings.data_dir, proxies=settings.proxies)
    index = BoundaryIndex(provider, ttl=settings.index_ttl)
    oracle = StreetViewOracle(
        settings.require_api_key(),
        timeout=settings.streetview_timeout,
        proxies=settings.proxies,
    )
    return LocationSampler(index, oracle, rng=rng, oracle_retries=settings.streetview_retries)


# Global sampler instance
_sampler: Optional[LocationSampler] = None
_sampler_lock = threading.Lock()


def get_sampler() -> LocationSampler:
    """Get or create the process-wide sampler."""
    global _sampler
    if _sampler is None:
        with _sampler_lock:
            if _sampler is None:
                _sampler = create_sampler()
    return _sampler


def generate_validated_location(preferences: Optional[Sequence[PreferenceRegion]] = None) -> ValidatedLocation:
    """Generate a validated location with the process-wide sampler."""
    return get_sampler().generate_validated_location(preferences)
