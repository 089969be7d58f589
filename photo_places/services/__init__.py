"""Geocoding services: remote client, durable cache and lookup orchestration."""

from .geocode import Failed, GeocodeResult, MapboxGeocoder, Resolved
from .geocode_cache import GeocodeCacheStore, PersistencePolicy
from .location_names import LocationNameService, open_location_service
from .static_map import static_map_url

__all__ = [
    "Failed",
    "GeocodeCacheStore",
    "GeocodeResult",
    "LocationNameService",
    "MapboxGeocoder",
    "PersistencePolicy",
    "Resolved",
    "open_location_service",
    "static_map_url",
]
