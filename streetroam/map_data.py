"""Local Natural Earth boundary datasets: loading and first-time download."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from .errors import DatasetError

logger = logging.getLogger(__name__)

# Natural Earth 1:10m country boundaries and minor islands
WORLD_MAP_URL = "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/master/geojson/ne_10m_admin_0_countries.geojson"
MINOR_ISLANDS_URL = "https://raw.githubusercontent.com/martynafford/natural-earth-geojson/master/10m/physical/ne_10m_minor_islands.json"

WORLD_MAP_FILE = "world.geojson"
MINOR_ISLANDS_FILE = "minor_islands.json"

DOWNLOAD_TIMEOUT = 120


class MapDataManager:
    """Reads the two boundary collections from a data directory."""

    def __init__(
        self,
        data_dir: str = "data/maps",
        proxies: Optional[Dict[str, str]] = None,
        timeout: float = DOWNLOAD_TIMEOUT,
    ):
        """Initialize the manager.

        Args:
            data_dir: Directory holding world.geojson and minor_islands.json
            proxies: Optional requests-style proxy mapping used for downloads
            timeout: Download timeout in seconds
        """
        self.data_dir = Path(data_dir)
        self.proxies = proxies
        self.timeout = timeout

    @property
    def world_path(self) -> Path:
        return self.data_dir / WORLD_MAP_FILE

    @property
    def minor_islands_path(self) -> Path:
        return self.data_dir / MINOR_ISLANDS_FILE

    def load_world(self) -> Dict[str, Any]:
        """Load the primary country boundary collection.

        Raises:
            DatasetError: If the file is missing or is not a FeatureCollection
        """
        return self._load_collection(self.world_path)

    def load_minor_islands(self) -> Dict[str, Any]:
        """Load the secondary minor-islands collection.

        Raises:
            DatasetError: If the file is missing or is not a FeatureCollection
        """
        return self._load_collection(self.minor_islands_path)

    def _load_collection(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise DatasetError(f"Map data file does not exist: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            raise DatasetError(f"Could not read map data file {path}: {e}")

        if not isinstance(data, dict) or not isinstance(data.get("features"), list):
            raise DatasetError(f"{path} is not a GeoJSON FeatureCollection")
        return data

    def ensure_data(self) -> None:
        """Download whichever dataset files are missing.

        The world map is required; a failed minor-islands download is logged
        and left for the index to skip.

        Raises:
            DatasetError: If the world map cannot be downloaded
        """
        if not self.world_path.exists():
            self._download(WORLD_MAP_URL, self.world_path)

        if not self.minor_islands_path.exists():
            try:
                self._download(MINOR_ISLANDS_URL, self.minor_islands_path)
            except DatasetError as e:
                logger.warning("Minor islands download failed, continuing without them: %s", e)

    def _download(self, url: str, path: Path) -> None:
        logger.info("Downloading map data from %s", url)
        try:
            response = requests.get(url, timeout=self.timeout, proxies=self.proxies)
        except requests.RequestException as e:
            raise DatasetError(f"Failed to download {url}: {e}")

        if response.status_code != 200:
            raise DatasetError(f"Failed to download {url}: HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise DatasetError(f"Downloaded data from {url} is not valid JSON: {e}")
        if not isinstance(data, dict) or not isinstance(data.get("features"), list):
            raise DatasetError(f"Downloaded data from {url} is not a GeoJSON FeatureCollection")

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(response.content)

        logger.info(
            "Saved %s (%.2f KB, %d features)",
            path, len(response.content) / 1024, len(data["features"]),
        )

    def data_info(self) -> Dict[str, Any]:
        """Describe the local world map file.

        Returns:
            Dictionary with exists, path, size_kb and features_count when readable
        """
        path = self.world_path
        if not path.exists():
            return {"exists": False, "path": str(path)}

        info: Dict[str, Any] = {
            "exists": True,
            "path": str(path),
            "size_kb": path.stat().st_size / 1024,
            "minor_islands_exists": self.minor_islands_path.exists(),
        }
        try:
            info["features_count"] = len(self.load_world()["features"])
        except DatasetError as e:
            info["error"] = str(e)
        return info
