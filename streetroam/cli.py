"""Command line sampler.

Examples:
    streetroam --count 5
    streetroam --region 51.7,51.3,0.2,-0.5 --count 3 --output points.json
    streetroam --dry-run --count 1000 --seed 42
"""

import argparse
import json
import logging
import random
import sys
from typing import List, Optional

from tqdm import tqdm

from .boundary_index import BoundaryIndex
from .config import Settings
from .errors import DatasetError, IndexUnavailable
from .map_data import MapDataManager
from .regions import PreferenceRegion, validate_preferences
from .sampling import LocationSampler
from .streetview import StreetViewOracle


def parse_region(value: str) -> PreferenceRegion:
    """Parse "north,south,east,west[,label]" into a PreferenceRegion."""
    parts = [part.strip() for part in value.split(",")]
    if len(parts) not in (4, 5):
        raise argparse.ArgumentTypeError(f"expected north,south,east,west[,label], got {value!r}")
    try:
        north, south, east, west = (float(p) for p in parts[:4])
    except ValueError:
        raise argparse.ArgumentTypeError(f"region edges must be numbers, got {value!r}")
    label = parts[4] if len(parts) == 5 else ""
    return PreferenceRegion(north=north, south=south, east=east, west=west, label=label)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="streetroam",
        description="Generate random land locations with Street View imagery",
    )
    parser.add_argument("--count", type=int, default=1, help="Number of locations to generate")
    parser.add_argument(
        "--region", type=parse_region, action="append", default=[],
        help="Interest rectangle north,south,east,west[,label]; repeatable",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible sampling")
    parser.add_argument("--dry-run", action="store_true", help="Sample candidates without querying Street View")
    parser.add_argument("--stats", action="store_true", help="Print boundary index statistics and exit")
    parser.add_argument("--download", action="store_true", help="Download missing map data before sampling")
    parser.add_argument("--output", default=None, help="Write results to this JSON file")
    parser.add_argument("--quiet", action="store_true", help="Only print warnings and the final results")
    return parser


def _no_oracle(lat, lng, radius):
    raise RuntimeError("Street View oracle is disabled in dry-run mode")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = Settings.from_env()
    provider = MapDataManager(settings.data_dir, proxies=settings.proxies)
    index = BoundaryIndex(provider, ttl=settings.index_ttl)

    if args.download:
        try:
            provider.ensure_data()
        except DatasetError as e:
            print(f"❌ Map data download failed: {e}", file=sys.stderr)
            return 1
        if not args.quiet:
            info = provider.data_info()
            print(f"🗺️  {info['path']}: {info.get('features_count', 0)} features, {info.get('size_kb', 0):.1f} KB")

    if args.stats:
        try:
            stats = index.stats()
            stats["map_data"] = provider.data_info()
        except IndexUnavailable as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1
        print(json.dumps(stats, indent=2))
        return 0

    preferences = []
    if args.region:
        try:
            preferences = validate_preferences(args.region)
        except ValueError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 2

    rng = random.Random(args.seed) if args.seed is not None else None
    if args.dry_run:
        oracle = _no_oracle
    else:
        try:
            oracle = StreetViewOracle(
                settings.require_api_key(),
                timeout=settings.streetview_timeout,
                proxies=settings.proxies,
            )
        except ValueError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 2

    sampler = LocationSampler(index, oracle, rng=rng, oracle_retries=settings.streetview_retries)

    results = []
    try:
        for _ in tqdm(range(args.count), desc="Sampling", disable=args.quiet or args.count < 2):
            if args.dry_run:
                point = sampler.generate_candidate(preferences)
                results.append({"latitude": point.latitude, "longitude": point.longitude, "method": point.method})
            else:
                results.append(sampler.generate_validated_location(preferences).to_dict())
    except IndexUnavailable as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(results, f, indent=2)
        if not args.quiet:
            print(f"💾 Saved {len(results)} locations to {args.output}")
    else:
        print(json.dumps(results, indent=2))

    fallbacks = sum(1 for r in results if r.get("is_fallback"))
    if fallbacks:
        print(f"⚠️  {fallbacks} location(s) used the fixed fallback", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
