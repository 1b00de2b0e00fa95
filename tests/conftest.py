"""Pytest configuration and shared fixtures."""

import random

import pytest

from streetroam.errors import DatasetError, OracleUnavailable
from streetroam.streetview import ImageryMatch


def square_feature(name, code, west, south, size, hole=None, geometry_type="Polygon"):
    """GeoJSON feature for an axis-aligned square, optionally with a square hole."""
    rings = [[
        [west, south], [west + size, south], [west + size, south + size], [west, south + size], [west, south],
    ]]
    if hole:
        hw, hs, hsize = hole
        rings.append([[hw, hs], [hw + hsize, hs], [hw + hsize, hs + hsize], [hw, hs + hsize], [hw, hs]])
    coordinates = rings if geometry_type == "Polygon" else [rings]
    return {
        "type": "Feature",
        "properties": {"NAME": name, "ISO_A3": code},
        "geometry": {"type": geometry_type, "coordinates": coordinates},
    }


def feature_collection(*features):
    return {"type": "FeatureCollection", "features": list(features)}


class FakeProvider:
    """In-memory dataset provider that counts loads."""

    def __init__(self, world=None, islands=None):
        self.world = world
        self.islands = islands
        self.world_loads = 0
        self.island_loads = 0

    def load_world(self):
        self.world_loads += 1
        if self.world is None:
            raise DatasetError("world map missing")
        return self.world

    def load_minor_islands(self):
        self.island_loads += 1
        if self.islands is None:
            raise DatasetError("minor islands missing")
        return self.islands


class StubOracle:
    """Records calls; returns a match once the radius reaches hit_radius."""

    def __init__(self, hit_radius=None, hit_unbounded=False, errors=None, match=None):
        self.hit_radius = hit_radius
        self.hit_unbounded = hit_unbounded
        self.errors = list(errors or [])
        self.match = match or ImageryMatch(10.5, 20.5, "pano-123")
        self.calls = []

    def __call__(self, lat, lng, radius):
        self.calls.append((lat, lng, radius))
        if self.errors:
            if self.errors.pop(0):
                raise OracleUnavailable("connection reset")
        if radius is None:
            return self.match if self.hit_unbounded else None
        if self.hit_radius is not None and radius >= self.hit_radius:
            return self.match
        return None


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def world_collection():
    return feature_collection(
        square_feature("Alpha", "AAA", 0, 0, 10),
        {
            "type": "Feature",
            "properties": {"NAME": "Beta", "ISO_A3": "BBB"},
            "geometry": {
                "type": "MultiPolygon",
                "coordinates": [
                    [[[20, 20], [22, 20], [22, 22], [20, 22], [20, 20]]],
                    [[[30, 30], [31, 30], [31, 31], [30, 31], [30, 30]]],
                ],
            },
        },
        # Southern polar landmass
        square_feature("Antarctica", "ATA", -50, -89, 20),
        # Degenerate outer ring
        {
            "type": "Feature",
            "properties": {"NAME": "Broken", "ISO_A3": "BRK"},
            "geometry": {"type": "Polygon", "coordinates": [[[1, 1], [2, 2], [1, 1]]]},
        },
        {"type": "Feature", "properties": {"NAME": "Nothing"}, "geometry": None},
    )


@pytest.fixture
def islands_collection():
    return feature_collection(
        {
            "type": "Feature",
            "properties": {"featurecla": "Minor island"},
            "geometry": {"type": "Polygon", "coordinates": [[[40, 5], [40.5, 5], [40.5, 5.5], [40, 5.5], [40, 5]]]},
        },
    )


@pytest.fixture
def provider(world_collection, islands_collection):
    return FakeProvider(world_collection, islands_collection)
