"""Error hierarchy for the cache, the geocoding client and configuration."""

from __future__ import annotations


class PhotoPlacesError(Exception):
    """Base class for place-name lookup failures."""


class CacheLoadError(PhotoPlacesError):
    """Raised when the durable cache file cannot be read or decoded."""


class CacheFlushError(PhotoPlacesError):
    """Raised when the cache snapshot cannot be written to disk."""


class GeocodingError(PhotoPlacesError):
    """Raised when a remote lookup does not yield a place name."""


class GeocodingHTTPError(GeocodingError):
    """Raised for transport failures and non-success responses."""


class GeocodingPayloadError(GeocodingError):
    """Raised when the response body lacks the expected feature list."""


class ConfigurationError(PhotoPlacesError):
    """Raised when a required setting is missing or invalid."""
