"""Choosing which region to sample from.

Selection is two-stage: a country is picked uniformly among the countries
present, then a region inside it is picked in proportion to its area. This
keeps a country made of thousands of islands from outweighing a country
with one large landmass, while still favouring a country's big regions.
"""

import logging
import random
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from .errors import IndexUnavailable
from .regions import BoundaryRegion, PreferenceRegion, world_fallback_region

logger = logging.getLogger(__name__)


def select_source(
    preferences: Optional[Sequence[PreferenceRegion]],
    index,
    strict: bool = True,
) -> List[BoundaryRegion]:
    """Candidate regions for one sampling request.

    Args:
        preferences: Interest rectangles; empty or None means world sampling
        index: BoundaryIndex consulted for world sampling
        strict: If False, an unavailable index yields an empty list instead of raising

    Returns:
        One synthetic region per usable rectangle, or the full index

    Raises:
        IndexUnavailable: For world sampling with strict=True when the index cannot be built
    """
    if preferences:
        regions = []
        for pref in preferences:
            if not pref.bounds.is_valid():
                logger.warning("Skipping invalid preference region %s (%s)", pref.bounds.to_dict(), pref.label)
                continue
            regions.append(pref.to_region())
        return regions

    try:
        return index.get_regions()
    except IndexUnavailable as e:
        if strict:
            raise
        logger.error("Boundary index unavailable, sampling from world bounds: %s", e)
        return []


def group_by_country(regions: Sequence[BoundaryRegion]) -> Dict[str, List[BoundaryRegion]]:
    """Bucket regions by country code, then name, then UNKNOWN, in first-seen order."""
    buckets: Dict[str, List[BoundaryRegion]] = OrderedDict()
    for region in regions:
        buckets.setdefault(region.country_key, []).append(region)
    return buckets


def select_weighted(regions: Sequence[BoundaryRegion], rng=None) -> BoundaryRegion:
    """Pick one region with probability proportional to its weight.

    Weight is the true polygon area (bounding box area without geometry),
    boosted for minor islands. Falls back to a uniform pick when every
    weight is zero.
    """
    rng = rng or random
    if len(regions) == 1:
        return regions[0]

    weights = [region.weight for region in regions]
    total = sum(weights)
    if total <= 0:
        return rng.choice(regions)

    target = rng.random() * total
    cumulative = 0.0
    for region, weight in zip(regions, weights):
        cumulative += weight
        if target < cumulative:
            return region
    # Float rounding can leave target == total
    return regions[-1]


def select_region(regions: Sequence[BoundaryRegion], rng=None) -> BoundaryRegion:
    """Two-stage weighted selection: uniform country, then area-weighted region.

    Args:
        regions: Candidate regions
        rng: random.Random-like source; the random module when None

    Returns:
        The chosen region, or the world fallback region for empty input
    """
    rng = rng or random
    if not regions:
        return world_fallback_region()
    if len(regions) == 1:
        return regions[0]

    buckets = group_by_country(regions)
    if len(buckets) == 1:
        bucket = next(iter(buckets.values()))
    else:
        bucket = rng.choice(list(buckets.values()))

    return select_weighted(bucket, rng)
