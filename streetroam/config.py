"""Environment-driven settings for the sampling engine."""

import os
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlsplit, urlunsplit, quote

from dotenv import load_dotenv

load_dotenv()


DEFAULT_DATA_DIR = "data/maps"
DEFAULT_INDEX_TTL = 3600.0
DEFAULT_STREETVIEW_TIMEOUT = 10.0
DEFAULT_STREETVIEW_RETRIES = 1


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def build_proxy_url(proxy_url: str, user: Optional[str] = None, password: Optional[str] = None) -> str:
    """Embed proxy credentials into a proxy URL.

    Args:
        proxy_url: Proxy URL such as "http://proxy.local:3128"
        user: Optional proxy username
        password: Optional proxy password

    Returns:
        The proxy URL, with "user:password@" added when both are given
    """
    if not (user and password):
        return proxy_url
    parts = urlsplit(proxy_url)
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    netloc = f"{quote(user, safe='')}:{quote(password, safe='')}@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


@dataclass
class Settings:
    """Runtime settings, usually read from the environment via from_env()."""

    google_maps_api_key: Optional[str] = None
    data_dir: str = DEFAULT_DATA_DIR
    index_ttl: float = DEFAULT_INDEX_TTL
    streetview_timeout: float = DEFAULT_STREETVIEW_TIMEOUT
    streetview_retries: int = DEFAULT_STREETVIEW_RETRIES
    proxy_url: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and any .env file).

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        proxy_url = os.getenv("MAPS_PROXY_URL") or os.getenv("PROXY_URL")
        if proxy_url:
            proxy_url = build_proxy_url(proxy_url, os.getenv("PROXY_USER"), os.getenv("PROXY_PASS"))

        retries = _get_int("STREETVIEW_RETRIES", DEFAULT_STREETVIEW_RETRIES)
        if retries < 0:
            raise ValueError(f"STREETVIEW_RETRIES must not be negative, got {retries}")

        return cls(
            google_maps_api_key=os.getenv("GOOGLE_MAPS_API_KEY") or None,
            data_dir=os.getenv("STREETROAM_DATA_DIR") or DEFAULT_DATA_DIR,
            index_ttl=_get_float("STREETROAM_INDEX_TTL", DEFAULT_INDEX_TTL),
            streetview_timeout=_get_float("STREETVIEW_TIMEOUT", DEFAULT_STREETVIEW_TIMEOUT),
            streetview_retries=retries,
            proxy_url=proxy_url or None,
        )

    @property
    def proxies(self) -> Optional[Dict[str, str]]:
        """Proxy mapping in the shape requests expects, or None."""
        if not self.proxy_url:
            return None
        return {"http": self.proxy_url, "https": self.proxy_url}

    def require_api_key(self) -> str:
        """Return the Google Maps API key.

        Raises:
            ValueError: If GOOGLE_MAPS_API_KEY environment variable is not set
        """
        if not self.google_maps_api_key:
            raise ValueError("GOOGLE_MAPS_API_KEY environment variable is required")
        return self.google_maps_api_key
