"""In-memory observation buffer.

The ingestor is the only writer of sensor fields; the submitter is the only
component allowed to clear them.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from signalk_windy.models.signalk import Position


class ObservationBuffer(BaseModel):
    """Latest readings accumulated since the last successful submission.

    Units are the ones submitted to Windy: m/s, degrees, degrees Celsius and
    percent. ``wind_gust`` is the running maximum of every sample appended to
    ``wind_speed`` since the last clear.
    """

    model_config = ConfigDict(extra="forbid")

    position: Position | None = None
    wind_speed: list[float] = Field(default_factory=list)
    wind_gust: float | None = None
    wind_direction: int | None = None
    water_temperature: float | None = None
    temperature: float | None = None
    pressure: float | None = None
    humidity: int | None = None
    last_successful_update: datetime | None = None

    def add_wind_speed(self, speed: float) -> None:
        if self.wind_gust is None or speed > self.wind_gust:
            self.wind_gust = speed
        self.wind_speed.append(speed)

    @property
    def latest_wind_speed(self) -> float | None:
        return self.wind_speed[-1] if self.wind_speed else None

    def missing_required(self) -> list[str]:
        """Names of the fields that must be present before submitting."""
        missing: list[str] = []
        if self.position is None:
            missing.append("position")
        if not self.wind_speed:
            missing.append("wind speed")
        if self.wind_direction is None:
            missing.append("wind direction")
        if self.temperature is None:
            missing.append("temperature")
        return missing

    def mark_submitted(self, at: datetime) -> None:
        """Record a successful submission and clear every sensor field."""
        self.last_successful_update = at
        self.position = None
        self.wind_speed = []
        self.wind_gust = None
        self.wind_direction = None
        self.water_temperature = None
        self.temperature = None
        self.pressure = None
        self.humidity = None
