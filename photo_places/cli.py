"""Command line interface for place-name lookups and cache inspection."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from pathlib import Path

from dotenv import load_dotenv

from photo_places.core.config import Settings, get_settings
from photo_places.core.exceptions import ConfigurationError
from photo_places.logging import get_logger, setup_logging
from photo_places.services.geocode_cache import GeocodeCacheStore, PersistencePolicy
from photo_places.services.location_names import open_location_service
from photo_places.services.static_map import static_map_url
from photo_places.utils.geo import Coordinate, cache_key

logger = get_logger(__name__)


def _latitude(value: str) -> float:
    lat = float(value)
    if not -90.0 <= lat <= 90.0:
        msg = f"latitude out of range: {value}"
        raise argparse.ArgumentTypeError(msg)
    return lat


def _longitude(value: str) -> float:
    lng = float(value)
    if not -180.0 <= lng <= 180.0:
        msg = f"longitude out of range: {value}"
        raise argparse.ArgumentTypeError(msg)
    return lng


def _add_coordinate_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--lat", type=_latitude, required=True, help="Latitude in decimal degrees")
    parser.add_argument(
        "--lng", type=_longitude, required=True, help="Longitude in decimal degrees"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Photo place-name lookup utilities")
    parser.add_argument(
        "--cache-file",
        type=Path,
        default=None,
        help="Path to the JSON location cache (defaults to GEOCODE_CACHE_PATH)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup_parser = subparsers.add_parser("lookup", help="Resolve a coordinate to a place name")
    _add_coordinate_args(lookup_parser)
    lookup_parser.add_argument(
        "--map",
        action="store_true",
        help="Also print the static map image URL",
    )

    map_parser = subparsers.add_parser("map-url", help="Print a static map image URL")
    _add_coordinate_args(map_parser)
    map_parser.add_argument("--zoom", type=float, default=15, help="Zoom level")
    map_parser.add_argument("--bearing", type=float, default=0, help="Map rotation in degrees")
    map_parser.add_argument("--width", type=int, default=300, help="Image width in pixels")
    map_parser.add_argument("--height", type=int, default=200, help="Image height in pixels")

    subparsers.add_parser("cache-info", help="Show cache location and entry count")
    return parser


def _settings_for(args: argparse.Namespace) -> Settings:
    settings = get_settings()
    if args.cache_file is not None:
        settings = settings.model_copy(update={"geocode_cache_path": args.cache_file})
    return settings


def _map_url(settings: Settings, coordinate: Coordinate, **kwargs: float) -> str:
    return static_map_url(
        coordinate,
        access_token=settings.mapbox_access_token,
        base_url=settings.static_map_base_url,
        style=settings.static_map_style,
        **kwargs,
    )


async def _run_lookup(settings: Settings, args: argparse.Namespace) -> int:
    coordinate = Coordinate(args.lat, args.lng)
    async with open_location_service(settings) as service:
        name = await service.get_location_name(coordinate)
    print(f"{cache_key(coordinate)}\t{name}")
    if args.map:
        print(_map_url(settings, coordinate))
    return 0


def _run_map_url(settings: Settings, args: argparse.Namespace) -> int:
    coordinate = Coordinate(args.lat, args.lng)
    print(
        _map_url(
            settings,
            coordinate,
            zoom=args.zoom,
            bearing=args.bearing,
            width=args.width,
            height=args.height,
        )
    )
    return 0


def _run_cache_info(settings: Settings) -> int:
    policy = PersistencePolicy(settings.geocode_persistence)
    store = GeocodeCacheStore.open(settings.geocode_cache_path, policy)
    print(f"path: {store.path}")
    print(f"policy: {store.policy.value}")
    print(f"entries: {len(store)}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_file)

    try:
        settings = _settings_for(args)
        if args.command == "lookup":
            return asyncio.run(_run_lookup(settings, args))
        if args.command == "map-url":
            return _run_map_url(settings, args)
        if args.command == "cache-info":
            return _run_cache_info(settings)
    except (ConfigurationError, ValueError) as exc:
        logger.error("command_failed", command=args.command, error=str(exc))
        print(f"error: {exc}")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 2


__all__ = ["build_parser", "main"]
