"""Normalization helpers.

Centralizes defensive parsing and the Signal K (SI) to Windy unit conversions.
"""

from __future__ import annotations

import math
from typing import Any

from signalk_windy._constants import KELVIN_OFFSET, MS_TO_KNOTS, RAD_TO_DEG


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity.

    ``round()`` uses banker's rounding (``round(0.5) == 0``); sensor values
    are rounded the conventional way instead.
    """
    return math.floor(value + 0.5)


def radians_to_degrees(rad: float) -> int:
    return round_half_up(rad * RAD_TO_DEG)


def kelvin_to_celsius(kelvin: float) -> float:
    return round(kelvin - KELVIN_OFFSET, 1)


def fraction_to_percent(fraction: float) -> int:
    """Convert a 0-1 ratio (Signal K humidity) to an integer percentage."""
    return round_half_up(100 * fraction)


def round_speed(speed: float) -> float:
    return round(speed, 2)


def ms_to_knots(speed: float | None) -> float | None:
    if speed is None:
        return None
    return round(speed * MS_TO_KNOTS, 1)
