"""Exception types raised by streetroam."""


class StreetroamError(Exception):
    """Base class for all streetroam errors."""


class DatasetError(StreetroamError):
    """A boundary dataset file is missing, unreadable or not GeoJSON."""


class IndexUnavailable(StreetroamError):
    """The boundary index could not be built from the primary dataset."""


class OracleUnavailable(StreetroamError):
    """The imagery oracle could not be reached or returned garbage.

    Distinct from a clean miss: the service answered nothing useful at all.
    """


class DegenerateGeometryError(StreetroamError, ValueError):
    """A ring or polygon has too few vertices to describe an area."""
