"""Place-name lookup combining the durable cache with the remote geocoder."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog

from photo_places.core.config import UNKNOWN_LOCATION, Settings, get_settings
from photo_places.services.geocode import Failed, GeocodeResult, MapboxGeocoder, Resolved
from photo_places.services.geocode_cache import GeocodeCacheStore, PersistencePolicy
from photo_places.utils.geo import Coordinate, cache_key, candidate_keys

logger = structlog.get_logger(__name__)


class LocationNameService:
    """Return cached place names and fetch each unknown coordinate at most once.

    Overlapping lookups for the same uncached key share one in-flight task.
    Failed lookups are not cached, so the next build retries them.
    """

    def __init__(
        self,
        store: GeocodeCacheStore,
        geocoder: MapboxGeocoder,
        *,
        fallback_name: str = UNKNOWN_LOCATION,
    ) -> None:
        self.store = store
        self.geocoder = geocoder
        self.fallback_name = fallback_name
        self.fetch_count = 0
        self._inflight: dict[str, asyncio.Task[GeocodeResult]] = {}

    def cached_name(self, coordinate: Coordinate) -> str | None:
        primary, *coarser = candidate_keys(coordinate)
        name = self.store.get(primary)
        if name is not None:
            return name
        # Coarser keys only cover area entries seeded in the cache file,
        # never names fetched during this run.
        for key in coarser:
            name = self.store.get_loaded(key)
            if name is not None:
                return name
        return None

    async def lookup(self, coordinate: Coordinate) -> GeocodeResult:
        name = self.cached_name(coordinate)
        if name is not None:
            return Resolved(name, cached=True)

        key = cache_key(coordinate)
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(key, coordinate))
            self._inflight[key] = task
        else:
            logger.debug("geocode_inflight_joined", key=key)
        # A cancelled waiter must not cancel the fetch other callers share.
        return await asyncio.shield(task)

    async def _fetch_and_store(self, key: str, coordinate: Coordinate) -> GeocodeResult:
        self.fetch_count += 1
        try:
            result = await self.geocoder.resolve(coordinate)
            if isinstance(result, Failed):
                return result

            if self.store.put(key, result.name):
                await asyncio.to_thread(self.store.flush_if_eager)
            return result
        finally:
            self._inflight.pop(key, None)

    async def get_location_name(self, coordinate: Coordinate) -> str:
        """Return the place name for ``coordinate`` or the fallback name."""

        result = await self.lookup(coordinate)
        if isinstance(result, Resolved):
            return result.name
        return self.fallback_name

    async def describe(self, gps: Mapping[str, Any] | None) -> str | None:
        """Name the location in a photo's GPS mapping; ``None`` without GPS."""

        coordinate = Coordinate.from_gps(gps)
        if coordinate is None:
            return None
        return await self.get_location_name(coordinate)

    async def flush(self) -> bool:
        return await asyncio.to_thread(self.store.flush)


@asynccontextmanager
async def open_location_service(
    settings: Settings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> AsyncIterator[LocationNameService]:
    """Load the cache, yield a service and always flush it on the way out."""

    settings = settings or get_settings()
    store = await asyncio.to_thread(
        GeocodeCacheStore.open,
        settings.geocode_cache_path,
        PersistencePolicy(settings.geocode_persistence),
    )

    owns_client = client is None
    http_client = client or httpx.AsyncClient()
    geocoder = MapboxGeocoder(
        settings.mapbox_access_token,
        base_url=settings.geocode_base_url,
        timeout=settings.geocode_timeout,
        client=http_client,
    )
    service = LocationNameService(
        store, geocoder, fallback_name=settings.geocode_fallback_name
    )
    try:
        yield service
    finally:
        try:
            await service.flush()
        finally:
            if owns_client:
                await http_client.aclose()
            logger.info(
                "location_service_closed",
                entries=len(store),
                fetches=service.fetch_count,
            )


__all__ = ["LocationNameService", "open_location_service"]
