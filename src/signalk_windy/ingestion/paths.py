"""Signal K path to buffer field mapping."""

from __future__ import annotations

import dataclasses
from enum import StrEnum
from typing import Any

from signalk_windy._constants import POLL_INTERVAL_MS, SELF_CONTEXT
from signalk_windy.config import SignalKPaths


class BufferField(StrEnum):
    """Buffer fields fed from Signal K; values match :class:`SignalKPaths` attribute names."""

    POSITION = "position"
    WIND_DIRECTION = "wind_direction"
    WIND_SPEED = "wind_speed"
    WATER_TEMPERATURE = "water_temperature"
    OUTSIDE_TEMPERATURE = "outside_temperature"
    PRESSURE = "pressure"
    HUMIDITY = "humidity"


DEFAULT_PATHS: dict[BufferField, str] = {
    BufferField.POSITION: "navigation.position",
    BufferField.WIND_DIRECTION: "environment.wind.directionGround",
    BufferField.WIND_SPEED: "environment.wind.speedOverGround",
    BufferField.WATER_TEMPERATURE: "environment.water.temperature",
    BufferField.OUTSIDE_TEMPERATURE: "environment.outside.temperature",
    BufferField.PRESSURE: "environment.outside.pressure",
    BufferField.HUMIDITY: "environment.outside.humidity",
}


def _overrides(paths: SignalKPaths) -> dict[BufferField, str]:
    result: dict[BufferField, str] = {}
    for field in dataclasses.fields(paths):
        value = getattr(paths, field.name)
        if value:
            result[BufferField(field.name)] = value
    return result


def build_path_map(paths: SignalKPaths) -> dict[str, BufferField]:
    """Map every accepted path to the field it updates.

    Default paths are always accepted. A configured override is accepted in
    addition and wins when it collides with another field's default.
    """
    path_map: dict[str, BufferField] = {path: field for field, path in DEFAULT_PATHS.items()}
    for field, path in _overrides(paths).items():
        path_map[path] = field
    return path_map


def subscribed_paths(paths: SignalKPaths) -> list[str]:
    """Paths to request from the server: the override if set, else the default."""
    overrides = _overrides(paths)
    return [overrides.get(field, default) for field, default in DEFAULT_PATHS.items()]


def build_subscription(paths: SignalKPaths, *, period_ms: int = POLL_INTERVAL_MS) -> dict[str, Any]:
    """Stream API subscription message for the configured paths."""
    return {
        "context": SELF_CONTEXT,
        "subscribe": [{"path": path, "period": period_ms} for path in subscribed_paths(paths)],
    }
