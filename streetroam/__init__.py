"""streetroam - random real-world locations with Street View imagery

Samples land coordinates weighted by country and area, optionally inside
user-chosen interest rectangles, and resolves each one to a nearby point
where outdoor Street View imagery exists.
"""

from .boundary_index import BoundaryIndex
from .errors import IndexUnavailable, OracleUnavailable
from .regions import BoundaryRegion, PreferenceRegion, ValidatedLocation
from .sampling import LocationSampler, create_sampler, generate_validated_location

__version__ = "0.1.0"
__all__ = [
    "BoundaryIndex",
    "BoundaryRegion",
    "IndexUnavailable",
    "LocationSampler",
    "OracleUnavailable",
    "PreferenceRegion",
    "ValidatedLocation",
    "create_sampler",
    "generate_validated_location",
]
