"""Reverse geocoding against the Mapbox places endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from photo_places.core.config import MAPBOX_GEOCODE_URL
from photo_places.core.exceptions import (
    GeocodingError,
    GeocodingHTTPError,
    GeocodingPayloadError,
)
from photo_places.utils.geo import Coordinate, format_degrees

logger = structlog.get_logger(__name__)

_USER_AGENT = "photo-places/0.1"
# The first feature is usually a street address; the second is the locality.
_PLACE_FEATURE_INDEX = 1


@dataclass(frozen=True)
class Resolved:
    """A place name, either fetched remotely or served from the cache."""

    name: str
    cached: bool = False


@dataclass(frozen=True)
class Failed:
    """A lookup that produced no usable place name."""

    reason: str


GeocodeResult = Resolved | Failed


def extract_place_name(payload: Any) -> str:
    """Return ``features[1].place_name`` or raise ``GeocodingPayloadError``."""

    features = payload.get("features") if isinstance(payload, dict) else None
    if not isinstance(features, list):
        raise GeocodingPayloadError("response has no feature list")
    if len(features) <= _PLACE_FEATURE_INDEX:
        raise GeocodingPayloadError(f"expected at least 2 features, got {len(features)}")

    feature = features[_PLACE_FEATURE_INDEX]
    name = feature.get("place_name") if isinstance(feature, dict) else None
    if not isinstance(name, str) or not name.strip():
        raise GeocodingPayloadError("feature has no place_name")
    return name


class MapboxGeocoder:
    """Resolve coordinates to place names; never raises to the caller."""

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str = MAPBOX_GEOCODE_URL,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    def build_url(self, coordinate: Coordinate) -> str:
        # Mapbox expects longitude first.
        lng = format_degrees(coordinate.longitude)
        lat = format_degrees(coordinate.latitude)
        return f"{self.base_url}/{lng},{lat}.json"

    async def _request_json(self, client: httpx.AsyncClient, url: str) -> Any:
        try:
            response = await client.get(
                url,
                params={"access_token": self.access_token},
                headers={"User-Agent": _USER_AGENT},
                timeout=self.timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise GeocodingHTTPError(f"request failed: {exc!r}") from exc

        if not response.is_success:
            raise GeocodingHTTPError(f"status {response.status_code}")

        try:
            return response.json()
        except ValueError as exc:
            raise GeocodingPayloadError("response is not valid JSON") from exc

    async def _fetch(self, coordinate: Coordinate) -> str:
        url = self.build_url(coordinate)
        if self._client is not None:
            payload = await self._request_json(self._client, url)
        else:
            async with httpx.AsyncClient() as client:
                payload = await self._request_json(client, url)
        return extract_place_name(payload)

    async def resolve(self, coordinate: Coordinate) -> GeocodeResult:
        """Look up ``coordinate`` and return ``Resolved`` or ``Failed``."""

        if not self.access_token:
            logger.warning(
                "geocode_skipped",
                reason="missing_access_token",
                lat=coordinate.latitude,
                lng=coordinate.longitude,
            )
            return Failed("missing access token")

        try:
            name = await self._fetch(coordinate)
        except GeocodingError as exc:
            logger.warning(
                "geocode_request_failed",
                lat=coordinate.latitude,
                lng=coordinate.longitude,
                error=str(exc),
            )
            return Failed(str(exc))

        logger.info(
            "geocode_resolved",
            lat=coordinate.latitude,
            lng=coordinate.longitude,
            place=name,
        )
        return Resolved(name)


__all__ = [
    "Failed",
    "GeocodeResult",
    "MapboxGeocoder",
    "Resolved",
    "extract_place_name",
]
