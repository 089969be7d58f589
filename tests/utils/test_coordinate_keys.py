from __future__ import annotations

import pytest

from photo_places.utils.geo import (
    Coordinate,
    cache_key,
    candidate_keys,
    format_degrees,
    round_half_away,
)

pytestmark = pytest.mark.unit


def test_cache_key_rounds_to_four_decimals() -> None:
    assert cache_key(Coordinate(48.85661234, 2.35219876)) == "48.8566,2.3522"


def test_cache_key_drops_trailing_zeros() -> None:
    assert cache_key(Coordinate(12.97, 77.59)) == "12.97,77.59"
    assert cache_key(Coordinate(48.0, -100.0)) == "48,-100"


def test_cache_key_negative_zero_prints_as_zero() -> None:
    assert cache_key(Coordinate(-0.00001, 0.0)) == "0,0"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1.00005, "1.0001"),
        (-1.00005, "-1.0001"),
        (2.00004, "2"),
        (-33.86882, "-33.8688"),
    ],
)
def test_round_half_away_from_zero(value: float, expected: str) -> None:
    assert format(round_half_away(value, 4).normalize(), "f") == expected


def test_nearby_coordinates_share_a_key() -> None:
    base = Coordinate(40.71281, -74.00602)
    nearby = Coordinate(40.71284, -74.00598)

    assert cache_key(base) == cache_key(nearby) == "40.7128,-74.006"


def test_latitude_always_precedes_longitude() -> None:
    assert cache_key(Coordinate(10.5, 20.25)) == "10.5,20.25"
    assert cache_key(Coordinate(20.25, 10.5)) == "20.25,10.5"


def test_cache_key_is_deterministic() -> None:
    coordinate = Coordinate(-22.951916, -43.210487)
    assert {cache_key(coordinate) for _ in range(5)} == {"-22.9519,-43.2105"}


def test_candidate_keys_go_from_fine_to_coarse() -> None:
    keys = candidate_keys(Coordinate(12.9716, 77.5946))
    assert keys == ["12.9716,77.5946", "12.972,77.595", "12.97,77.59"]


def test_candidate_keys_are_deduplicated() -> None:
    assert candidate_keys(Coordinate(12.97, 77.59)) == ["12.97,77.59"]


@pytest.mark.parametrize(
    "gps",
    [
        None,
        {},
        {"latitude": 12.0},
        {"latitude": "12.0", "longitude": 77.0},
        {"latitude": True, "longitude": 77.0},
        {"latitude": float("nan"), "longitude": 77.0},
    ],
)
def test_from_gps_rejects_missing_or_invalid_values(gps) -> None:
    assert Coordinate.from_gps(gps) is None


def test_from_gps_builds_coordinate() -> None:
    coordinate = Coordinate.from_gps({"latitude": 35, "longitude": 139.5, "altitude": 12})
    assert coordinate == Coordinate(35.0, 139.5)


@pytest.mark.parametrize(
    "value, expected",
    [
        (1e-05, "0.00001"),
        (-0.5, "-0.5"),
        (12.0, "12"),
        (-0.0, "0"),
        (2.3522, "2.3522"),
    ],
)
def test_format_degrees_uses_plain_decimal_notation(value: float, expected: str) -> None:
    assert format_degrees(value) == expected
