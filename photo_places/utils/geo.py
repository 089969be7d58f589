"""Coordinate value type and cache-key derivation."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

KEY_PRECISION = 4
FALLBACK_PRECISIONS = (4, 3, 2)


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    @classmethod
    def from_gps(cls, gps: Mapping[str, Any] | None) -> Coordinate | None:
        """Build a coordinate from a ``{"latitude", "longitude"}`` mapping.

        Returns ``None`` when the mapping is absent or either component is not
        a number, which is how photos without GPS metadata are represented.
        """

        if not gps:
            return None
        latitude = gps.get("latitude")
        longitude = gps.get("longitude")
        for value in (latitude, longitude):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return None
            if not math.isfinite(value):
                return None
        return cls(float(latitude), float(longitude))


def round_half_away(value: float, precision: int = KEY_PRECISION) -> Decimal:
    """Round ``value`` to ``precision`` decimals, halves away from zero."""

    # str() keeps the shortest repr so 12.34565 rounds as written, not as stored.
    quantum = Decimal(1).scaleb(-precision)
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def _format_component(value: Decimal) -> str:
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


def format_degrees(value: float) -> str:
    """Print ``value`` in plain decimal notation, e.g. ``1e-05`` as ``0.00001``."""

    return _format_component(Decimal(str(value)))


def cache_key(coordinate: Coordinate, precision: int = KEY_PRECISION) -> str:
    """Return the ``"<lat>,<lng>"`` key shared by all nearby coordinates."""

    lat = _format_component(round_half_away(coordinate.latitude, precision))
    lng = _format_component(round_half_away(coordinate.longitude, precision))
    return f"{lat},{lng}"


def candidate_keys(
    coordinate: Coordinate, precisions: Iterable[int] = FALLBACK_PRECISIONS
) -> list[str]:
    """Return the primary key followed by progressively coarser keys."""

    seen: set[str] = set()
    keys: list[str] = []
    for precision in precisions:
        key = cache_key(coordinate, precision)
        if key not in seen:
            seen.add(key)
            keys.append(key)
    return keys


__all__ = [
    "FALLBACK_PRECISIONS",
    "KEY_PRECISION",
    "Coordinate",
    "cache_key",
    "format_degrees",
    "candidate_keys",
    "round_half_away",
]
