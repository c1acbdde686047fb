"""Data models for Signal K deltas and the Windy.com payload."""

from signalk_windy.models.signalk import Delta, DeltaUpdate, DeltaValue, Position
from signalk_windy.models.windy import StationDescriptor, WindObservation, WindyUpdate

__all__ = [
    "Delta",
    "DeltaUpdate",
    "DeltaValue",
    "Position",
    "StationDescriptor",
    "WindObservation",
    "WindyUpdate",
]
