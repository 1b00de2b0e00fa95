"""Escalating-radius search for a coordinate with confirmed imagery.

The search walks a fixed, finite list of tiers and always ends in a
hardcoded known-good location, so it terminates with a result no matter
what the oracle says:

    radius tiers (ascending) -> unbounded query -> fixed fallback
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .errors import OracleUnavailable
from .regions import ValidatedLocation
from .streetview import ImageryMatch, calculate_heading

logger = logging.getLogger(__name__)

Oracle = Callable[[float, float, Optional[int]], Optional[ImageryMatch]]


@dataclass(frozen=True)
class SearchTier:
    """One oracle query; radius None means no radius constraint."""

    name: str
    radius: Optional[int]


# Explicit interest regions: stay as close to the sample as possible
NARROW_TIERS = (
    SearchTier("100m", 100),
    SearchTier("5km", 5_000),
    SearchTier("50km", 50_000),
    SearchTier("500km", 500_000),
    SearchTier("5000km", 5_000_000),
)

GLOBAL_TIERS = (
    SearchTier("10km", 10_000),
    SearchTier("50km", 50_000),
    SearchTier("200km", 200_000),
    SearchTier("1000km", 1_000_000),
    SearchTier("5000km", 5_000_000),
)

UNBOUNDED_TIER = SearchTier("unbounded", None)

# Trafalgar Square, London
FALLBACK_LATITUDE = 51.508039
FALLBACK_LONGITUDE = -0.128069
FALLBACK_PANO_ID = "FALLBACK_LOCATION"


def search_plan(has_narrow_preference: bool) -> List[SearchTier]:
    """Ordered tiers to try before the fixed fallback."""
    tiers = NARROW_TIERS if has_narrow_preference else GLOBAL_TIERS
    return list(tiers) + [UNBOUNDED_TIER]


def fallback_location(lat: Optional[float] = None, lng: Optional[float] = None) -> ValidatedLocation:
    candidate = (lat, lng) if lat is not None and lng is not None else None
    return ValidatedLocation(
        latitude=FALLBACK_LATITUDE,
        longitude=FALLBACK_LONGITUDE,
        imagery_id=FALLBACK_PANO_ID,
        is_fallback=True,
        candidate=candidate,
    )


def _query_tier(is_in_radius: Oracle, lat: float, lng: float, tier: SearchTier, retries: int) -> Optional[ImageryMatch]:
    """Query one tier, retrying transport failures; a final failure counts as a miss."""
    for attempt in range(retries + 1):
        try:
            return is_in_radius(lat, lng, tier.radius)
        except OracleUnavailable as e:
            logger.warning(
                "Imagery oracle unavailable at tier %s (attempt %d/%d) for (%.6f, %.6f): %s",
                tier.name, attempt + 1, retries + 1, lat, lng, e,
            )
    return None


def find_valid_point(
    lat: float,
    lng: float,
    has_narrow_preference: bool,
    is_in_radius: Oracle,
    retries: int = 0,
) -> ValidatedLocation:
    """Find imagery near a candidate point, widening the search until something hits.

    Args:
        lat: Candidate latitude
        lng: Candidate longitude
        has_narrow_preference: True when the caller supplied interest regions
        is_in_radius: Oracle called as (lat, lng, radius_meters_or_None)
        retries: Extra attempts at the same radius after an OracleUnavailable

    Returns:
        The oracle's matched coordinate and pano id, or the fixed fallback
    """
    for tier in search_plan(has_narrow_preference):
        match = _query_tier(is_in_radius, lat, lng, tier, retries)
        if match is None:
            logger.debug("No imagery within %s of (%.6f, %.6f)", tier.name, lat, lng)
            continue

        logger.info(
            "Found imagery %s at (%.6f, %.6f) within %s of (%.6f, %.6f)",
            match.pano_id, match.latitude, match.longitude, tier.name, lat, lng,
        )
        return ValidatedLocation(
            latitude=match.latitude,
            longitude=match.longitude,
            imagery_id=match.pano_id,
            candidate=(lat, lng),
            heading=calculate_heading(match.latitude, match.longitude, lat, lng),
            tier=tier.name,
        )

    logger.error(
        "No imagery found for (%.6f, %.6f) at any radius, returning fixed fallback location",
        lat, lng,
    )
    return fallback_location(lat, lng)
