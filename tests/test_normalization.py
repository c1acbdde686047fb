from __future__ import annotations

import math

import pytest

from signalk_windy.ingestion.normalize import (
    fraction_to_percent,
    kelvin_to_celsius,
    ms_to_knots,
    radians_to_degrees,
    round_half_up,
    round_speed,
    safe_float,
)


def test_kelvin_to_celsius_rounds_to_one_decimal() -> None:
    assert kelvin_to_celsius(273.15) == 0.0
    assert kelvin_to_celsius(300.15) == 27.0
    assert kelvin_to_celsius(283.15) == 10.0


def test_radians_to_degrees_rounds_to_integer() -> None:
    assert radians_to_degrees(math.pi) == 180
    assert radians_to_degrees(math.pi / 2) == 90
    assert radians_to_degrees(0.0) == 0


def test_humidity_fraction_to_percent() -> None:
    assert fraction_to_percent(0.455) == 46
    assert fraction_to_percent(1.0) == 100
    assert fraction_to_percent(0.0) == 0


def test_round_half_up_is_not_bankers_rounding() -> None:
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(-0.4) == 0


def test_round_speed_two_decimals() -> None:
    assert round_speed(5.126) == 5.13
    assert round_speed(7.0) == 7.0


def test_ms_to_knots() -> None:
    assert ms_to_knots(None) is None
    assert ms_to_knots(5.0) == 9.7
    assert ms_to_knots(3.0) == 5.8


@pytest.mark.parametrize("value", [None, "", "abc", True, float("nan"), float("inf"), {"a": 1}])
def test_safe_float_rejects_unusable_values(value: object) -> None:
    assert safe_float(value) is None


def test_safe_float_parses_numeric_strings() -> None:
    assert safe_float("101325") == 101325.0
    assert safe_float(3) == 3.0
