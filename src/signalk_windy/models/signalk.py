"""Signal K delta and value models.

Deltas arrive from the stream API as::

    {"context": "vessels.urn:mrn:...",
     "updates": [{"source": {...}, "timestamp": "...",
                  "values": [{"path": "navigation.position",
                              "value": {"latitude": 41.0, "longitude": -70.0}}]}]}

Unknown keys are ignored. The server ``hello`` message parses as a delta with
no updates.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from signalk_windy.ingestion.normalize import safe_float


class DeltaValue(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    path: str
    value: Any = None


class DeltaUpdate(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: str | None = None
    values: list[DeltaValue] = Field(default_factory=list)


class Delta(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    context: str | None = None
    updates: list[DeltaUpdate] = Field(default_factory=list)

    def first_value(self) -> DeltaValue | None:
        """Return the first value of the first update, if any.

        Later values in the same delta are not consulted.
        """
        if not self.updates or not self.updates[0].values:
            return None
        return self.updates[0].values[0]


class Position(BaseModel):
    """A ``navigation.position`` value."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lon", "lng"))

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)
