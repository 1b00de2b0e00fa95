"""Street View metadata queries used as the imagery oracle."""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from .errors import OracleUnavailable

logger = logging.getLogger(__name__)

METADATA_URL = "https://maps.googleapis.com/maps/api/streetview/metadata"
DEFAULT_TIMEOUT = 10.0

# Statuses meaning "no panorama here"; anything else besides OK is a service failure
MISS_STATUSES = ("ZERO_RESULTS", "NOT_FOUND")


@dataclass(frozen=True)
class ImageryMatch:
    """Panorama location reported by the oracle and its identifier."""

    latitude: float
    longitude: float
    pano_id: str


def calculate_heading(from_lat: float, from_lon: float, to_lat: float, to_lon: float) -> float:
    """Calculate heading from one point to another.

    Args:
        from_lat: Starting latitude
        from_lon: Starting longitude
        to_lat: Target latitude
        to_lon: Target longitude

    Returns:
        Heading in degrees (0-360)
    """
    lat1 = math.radians(from_lat)
    lat2 = math.radians(to_lat)
    delta_lon = math.radians(to_lon - from_lon)

    y = math.sin(delta_lon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(delta_lon)

    heading = math.degrees(math.atan2(y, x))
    return (heading + 360) % 360


class StreetViewOracle:
    """Answers "is there outdoor Street View imagery within R meters of here?".

    Instances are callable as ``oracle(lat, lng, radius)``. A radius of None
    leaves the radius parameter off the request.
    """

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        proxies: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the oracle.

        Args:
            api_key: Google Maps API key
            timeout: Per-request timeout in seconds
            proxies: Optional requests-style proxy mapping
            session: Optional requests session to reuse connections

        Raises:
            ValueError: If api_key is empty
        """
        if not api_key:
            raise ValueError("GOOGLE_MAPS_API_KEY environment variable is required")
        self.api_key = api_key
        self.timeout = timeout
        self.proxies = proxies
        self.session = session or requests.Session()

    def get_metadata(self, lat: float, lng: float, radius: Optional[int] = None) -> dict:
        """Fetch raw Street View metadata for a location.

        Raises:
            OracleUnavailable: On transport errors, non-200 responses or a non-JSON body
        """
        params = {
            "location": f"{lat:.6f},{lng:.6f}",
            "source": "outdoor",
            "key": self.api_key,
        }
        if radius is not None:
            params["radius"] = int(radius)

        try:
            response = self.session.get(
                METADATA_URL, params=params, timeout=self.timeout, proxies=self.proxies
            )
        except requests.RequestException as e:
            raise OracleUnavailable(f"Street View metadata request failed: {e}") from e

        if response.status_code != 200:
            raise OracleUnavailable(f"Street View metadata request failed: HTTP {response.status_code}")

        try:
            metadata = response.json()
        except ValueError as e:
            raise OracleUnavailable(f"Street View metadata response is not JSON: {e}") from e
        if not isinstance(metadata, dict):
            raise OracleUnavailable("Street View metadata response is not an object")
        return metadata

    def find_imagery(self, lat: float, lng: float, radius: Optional[int] = None) -> Optional[ImageryMatch]:
        """Return the nearest panorama within radius, or None if there is none.

        Raises:
            OracleUnavailable: On transport errors or statuses such as
                OVER_QUERY_LIMIT, REQUEST_DENIED and UNKNOWN_ERROR
        """
        metadata = self.get_metadata(lat, lng, radius)
        status = metadata.get("status")
        if status in MISS_STATUSES:
            logger.debug("No Street View imagery within %s m of (%.6f, %.6f)", radius, lat, lng)
            return None
        if status != "OK":
            message = metadata.get("error_message") or ""
            raise OracleUnavailable(f"Street View metadata status {status} {message}".rstrip())

        location = metadata.get("location") or {}
        try:
            return ImageryMatch(
                latitude=float(location["lat"]),
                longitude=float(location["lng"]),
                pano_id=str(metadata.get("pano_id") or ""),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise OracleUnavailable(f"Street View metadata has no usable location: {e}") from e

    __call__ = find_imagery
