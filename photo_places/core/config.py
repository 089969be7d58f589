# photo_places/core/config.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MAPBOX_GEOCODE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"
MAPBOX_STATIC_URL = "https://api.mapbox.com/styles/v1"
DEFAULT_CACHE_PATH = Path(".cache") / "location-names.json"
UNKNOWN_LOCATION = "Unknown Location"


class Settings(BaseSettings):
    mapbox_access_token: str = ""

    geocode_cache_path: Path = DEFAULT_CACHE_PATH
    geocode_persistence: Literal["eager", "deferred"] = "deferred"
    geocode_base_url: str = MAPBOX_GEOCODE_URL
    geocode_timeout: float = Field(default=10.0, gt=0)
    geocode_fallback_name: str = UNKNOWN_LOCATION

    static_map_base_url: str = MAPBOX_STATIC_URL
    static_map_style: str = "mapbox/outdoors-v11"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",  # MAPBOX_ACCESS_TOKEN etc. are read as-is
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process-wide settings read from the environment and ``.env``."""
    return Settings()
