from __future__ import annotations

import logging
import math
from typing import Any

import pytest

from signalk_windy.config import SignalKPaths
from signalk_windy.ingestion.delta import Ingestor
from signalk_windy.ingestion.paths import (
    DEFAULT_PATHS,
    BufferField,
    build_path_map,
    build_subscription,
    subscribed_paths,
)
from signalk_windy.models.signalk import Position
from signalk_windy.state.buffer import ObservationBuffer


def _delta(path: str, value: Any) -> dict[str, Any]:
    return {
        "context": "vessels.urn:mrn:imo:mmsi:123456789",
        "updates": [
            {
                "source": {"label": "n2k"},
                "timestamp": "2026-01-01T00:00:00.000Z",
                "values": [{"path": path, "value": value}],
            }
        ],
    }


def _ingestor(paths: SignalKPaths | None = None) -> tuple[Ingestor, ObservationBuffer]:
    buffer = ObservationBuffer()
    return Ingestor(buffer, build_path_map(paths or SignalKPaths())), buffer


def test_default_paths_update_each_field() -> None:
    ingestor, buffer = _ingestor()

    ingestor.process_delta(_delta("navigation.position", {"latitude": 41.0, "longitude": -70.0, "altitude": 3}))
    ingestor.process_delta(_delta("environment.wind.speedOverGround", 5.126))
    ingestor.process_delta(_delta("environment.wind.directionGround", math.pi))
    ingestor.process_delta(_delta("environment.water.temperature", 288.15))
    ingestor.process_delta(_delta("environment.outside.temperature", 300.15))
    ingestor.process_delta(_delta("environment.outside.pressure", "101325"))
    ingestor.process_delta(_delta("environment.outside.humidity", 0.455))

    assert buffer.position == Position(latitude=41.0, longitude=-70.0)
    assert buffer.wind_speed == [5.13]
    assert buffer.wind_gust == 5.13
    assert buffer.wind_direction == 180
    assert buffer.water_temperature == 15.0
    assert buffer.temperature == 27.0
    assert buffer.pressure == 101325.0
    assert buffer.humidity == 46


def test_gust_tracks_running_maximum() -> None:
    ingestor, buffer = _ingestor()
    samples = [5.0, 9.5, 3.0, 9.5, 7.25]

    for sample in samples:
        ingestor.apply("environment.wind.speedOverGround", sample)

    assert buffer.wind_speed == samples
    assert buffer.wind_gust == max(samples)
    assert all(buffer.wind_gust >= s for s in buffer.wind_speed)


def test_configured_path_matches_in_addition_to_default() -> None:
    ingestor, buffer = _ingestor(SignalKPaths(wind_speed="environment.wind.speedTrue"))

    assert ingestor.apply("environment.wind.speedTrue", 4.0)
    assert ingestor.apply("environment.wind.speedOverGround", 6.0)

    assert buffer.wind_speed == [4.0, 6.0]


def test_override_wins_over_other_fields_default() -> None:
    path_map = build_path_map(SignalKPaths(outside_temperature="environment.water.temperature"))

    assert path_map["environment.water.temperature"] == BufferField.OUTSIDE_TEMPERATURE
    assert path_map["environment.outside.temperature"] == BufferField.OUTSIDE_TEMPERATURE


def test_unknown_path_is_logged_and_ignored(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="signalk_windy.ingestion.delta")
    ingestor, buffer = _ingestor()

    assert not ingestor.apply("navigation.speedOverGround", 3.2)

    assert buffer == ObservationBuffer()
    assert "Unknown path: navigation.speedOverGround" in caplog.text


@pytest.mark.parametrize(
    "delta",
    [
        {},
        {"updates": []},
        {"updates": [{}]},
        {"updates": [{"values": []}]},
        {"updates": "not-a-list"},
        {"updates": [{"values": [{"value": 1.0}]}]},
        {"name": "signalk-server", "version": "2.0.0", "self": "vessels.urn:mrn:imo:mmsi:1", "roles": ["main"]},
    ],
)
def test_malformed_or_empty_delta_is_noop(delta: dict[str, Any]) -> None:
    ingestor, buffer = _ingestor()

    ingestor.process_delta(delta)

    assert buffer == ObservationBuffer()


def test_only_first_value_of_delta_is_consulted() -> None:
    ingestor, buffer = _ingestor()
    delta = {
        "updates": [
            {
                "values": [
                    {"path": "environment.outside.temperature", "value": 300.15},
                    {"path": "environment.wind.speedOverGround", "value": 5.0},
                ]
            },
            {"values": [{"path": "environment.outside.humidity", "value": 0.5}]},
        ]
    }

    ingestor.process_delta(delta)

    assert buffer.temperature == 27.0
    assert buffer.wind_speed == []
    assert buffer.humidity is None


@pytest.mark.parametrize(
    ("path", "value"),
    [
        ("environment.wind.speedOverGround", "gusty"),
        ("environment.wind.directionGround", None),
        ("environment.outside.temperature", {"value": 1}),
        ("navigation.position", {"latitude": None, "longitude": 2.0}),
        ("navigation.position", "41N 70W"),
    ],
)
def test_unusable_values_leave_buffer_unchanged(path: str, value: Any) -> None:
    ingestor, buffer = _ingestor()

    assert not ingestor.apply(path, value)
    assert buffer == ObservationBuffer()


def test_subscription_uses_override_or_default() -> None:
    paths = SignalKPaths(wind_direction="environment.wind.directionTrue")

    subscription = build_subscription(paths)

    assert subscription["context"] == "vessels.self"
    assert len(subscription["subscribe"]) == len(DEFAULT_PATHS)
    assert {"path": "environment.wind.directionTrue", "period": 1000} in subscription["subscribe"]
    assert "environment.wind.directionGround" not in subscribed_paths(paths)
    assert "navigation.position" in subscribed_paths(paths)
