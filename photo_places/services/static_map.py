"""Mapbox static map image URLs for photo location previews."""

from __future__ import annotations

from urllib.parse import urlencode

from photo_places.core.config import MAPBOX_STATIC_URL
from photo_places.core.exceptions import ConfigurationError
from photo_places.utils.geo import Coordinate, format_degrees


def static_map_url(
    coordinate: Coordinate,
    *,
    access_token: str,
    base_url: str = MAPBOX_STATIC_URL,
    style: str = "mapbox/outdoors-v11",
    zoom: float = 15,
    bearing: float = 0,
    width: int = 300,
    height: int = 200,
    retina: bool = True,
) -> str:
    """Return the URL of a static map centred on ``coordinate``."""

    if not access_token:
        raise ConfigurationError("MAPBOX_ACCESS_TOKEN is required for static map URLs")
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")

    size = f"{width}x{height}" + ("@2x" if retina else "")
    lng = format_degrees(coordinate.longitude)
    lat = format_degrees(coordinate.latitude)
    position = f"{lng},{lat},{zoom:g},{bearing:g}"
    query = urlencode({"access_token": access_token, "attribution": "false", "logo": "false"})
    return f"{base_url.rstrip('/')}/{style.strip('/')}/static/{position}/{size}?{query}"


__all__ = ["static_map_url"]
