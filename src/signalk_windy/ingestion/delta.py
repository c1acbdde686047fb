"""Signal K delta ingestion.

This module translates decoded deltas into observation buffer updates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from signalk_windy.ingestion.normalize import (
    fraction_to_percent,
    kelvin_to_celsius,
    radians_to_degrees,
    round_speed,
    safe_float,
)
from signalk_windy.ingestion.paths import BufferField
from signalk_windy.models.signalk import Delta, Position
from signalk_windy.state.buffer import ObservationBuffer

_logger = logging.getLogger(__name__)


def parse_delta(raw: Mapping[str, Any] | Delta) -> Delta | None:
    """Validate a raw delta, returning ``None`` for anything malformed."""
    if isinstance(raw, Delta):
        return raw
    try:
        return Delta.model_validate(raw)
    except ValidationError:
        _logger.debug("Ignoring malformed delta: %s", raw, exc_info=True)
        return None


class Ingestor:
    """Applies path/value updates to an :class:`ObservationBuffer`.

    ``path_map`` is built once (see :func:`build_path_map`) and not
    re-evaluated per update.
    """

    def __init__(self, buffer: ObservationBuffer, path_map: Mapping[str, BufferField]) -> None:
        self._buffer = buffer
        self._path_map = dict(path_map)
        self._handlers: dict[BufferField, Callable[[Any], bool]] = {
            BufferField.POSITION: self._set_position,
            BufferField.WIND_SPEED: self._add_wind_speed,
            BufferField.WIND_DIRECTION: self._set_wind_direction,
            BufferField.WATER_TEMPERATURE: self._set_water_temperature,
            BufferField.OUTSIDE_TEMPERATURE: self._set_temperature,
            BufferField.PRESSURE: self._set_pressure,
            BufferField.HUMIDITY: self._set_humidity,
        }

    def process_delta(self, raw: Mapping[str, Any] | Delta) -> None:
        """Apply the first value of the first update in *raw*.

        Empty or malformed deltas are a no-op.
        """
        delta = parse_delta(raw)
        if delta is None:
            return
        first = delta.first_value()
        if first is None:
            return
        self.apply(first.path, first.value)

    def apply(self, path: str, value: Any) -> bool:
        """Update the buffer field mapped to *path*. Returns whether state changed."""
        field = self._path_map.get(path)
        if field is None:
            _logger.debug("Unknown path: %s", path)
            return False
        if not self._handlers[field](value):
            _logger.debug("Ignoring unusable value for %s: %r", path, value)
            return False
        return True

    # ------------------------------------------------------------------
    # Field handlers
    # ------------------------------------------------------------------

    def _set_position(self, value: Any) -> bool:
        if isinstance(value, Position):
            self._buffer.position = value
            return True
        try:
            self._buffer.position = Position.model_validate(value)
        except ValidationError:
            return False
        return True

    def _add_wind_speed(self, value: Any) -> bool:
        speed = safe_float(value)
        if speed is None:
            return False
        self._buffer.add_wind_speed(round_speed(speed))
        return True

    def _set_wind_direction(self, value: Any) -> bool:
        rad = safe_float(value)
        if rad is None:
            return False
        self._buffer.wind_direction = radians_to_degrees(rad)
        return True

    def _set_water_temperature(self, value: Any) -> bool:
        kelvin = safe_float(value)
        if kelvin is None:
            return False
        self._buffer.water_temperature = kelvin_to_celsius(kelvin)
        return True

    def _set_temperature(self, value: Any) -> bool:
        kelvin = safe_float(value)
        if kelvin is None:
            return False
        self._buffer.temperature = kelvin_to_celsius(kelvin)
        return True

    def _set_pressure(self, value: Any) -> bool:
        pressure = safe_float(value)
        if pressure is None:
            return False
        self._buffer.pressure = pressure
        return True

    def _set_humidity(self, value: Any) -> bool:
        fraction = safe_float(value)
        if fraction is None:
            return False
        self._buffer.humidity = fraction_to_percent(fraction)
        return True
