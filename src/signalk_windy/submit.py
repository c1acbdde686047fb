"""Aggregation and submission of observations to Windy.com."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from signalk_windy._transport import Transport
from signalk_windy.config import WindyConfig
from signalk_windy.exceptions import WindyTransportError
from signalk_windy.models.windy import StationDescriptor, WindObservation, WindyUpdate
from signalk_windy.state.buffer import ObservationBuffer

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def median(samples: Sequence[float]) -> float:
    """Median of *samples*; the mean of the two middle values for even counts.

    *samples* is not modified. Raises :class:`ValueError` when empty.
    """
    if not samples:
        raise ValueError("median of empty sequence")
    nums = sorted(samples)
    mid = len(nums) // 2
    if len(nums) % 2:
        return nums[mid]
    return (nums[mid - 1] + nums[mid]) / 2


def build_update(
    buffer: ObservationBuffer,
    config: WindyConfig,
    name: str | None = None,
) -> WindyUpdate | None:
    """Aggregate *buffer* into a request body, or ``None`` if data is missing."""
    if buffer.missing_required():
        return None
    # missing_required() guarantees these are set
    assert buffer.position is not None  # noqa: S101
    assert buffer.wind_direction is not None  # noqa: S101
    assert buffer.temperature is not None  # noqa: S101

    station = StationDescriptor(
        station=config.station_id,
        name=name,
        provider=config.provider,
        url=config.url,
        lat=buffer.position.latitude,
        lon=buffer.position.longitude,
    )
    observation = WindObservation(
        station=config.station_id,
        temp=buffer.temperature,
        wind=median(buffer.wind_speed),
        gust=buffer.wind_gust,
        winddir=buffer.wind_direction,
        pressure=buffer.pressure,
        rh=buffer.humidity,
    )
    return WindyUpdate(stations=[station], observations=[observation])


def _log_failure(task: asyncio.Task[bool]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        _logger.error("Submission failed unexpectedly", exc_info=exc)


class Submitter:
    """Submits the buffer contents and clears them on success.

    At most one submission is in flight at a time; :meth:`schedule` skips a
    tick while the previous request is still running.
    """

    def __init__(
        self,
        config: WindyConfig,
        buffer: ObservationBuffer,
        transport: Transport,
        *,
        name: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._buffer = buffer
        self._transport = transport
        self._clock = clock
        self._task: asyncio.Task[bool] | None = None
        self.name = name

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    async def submit(self) -> bool:
        """Run one submit cycle. Returns ``True`` when Windy accepted the update."""
        update = build_update(self._buffer, self._config, self.name)
        if update is None:
            _logger.debug(
                "Not submitting due to lack of %s",
                ", ".join(self._buffer.missing_required()),
            )
            return False

        payload = update.to_payload()
        _logger.debug("Submitting data: %s", payload)
        try:
            await self._transport.post_update(self._config.api_key, payload)
        except WindyTransportError as exc:
            _logger.debug("Error submitting to Windy.com API: %s", exc)
            return False

        _logger.debug("Weather report successfully submitted")
        self._buffer.mark_submitted(self._clock())
        return True

    def schedule(self) -> asyncio.Task[bool] | None:
        """Start a submission in the background unless one is still running."""
        if self.in_flight:
            _logger.debug("Previous submission still in flight, skipping this interval")
            return None
        self._task = asyncio.create_task(self.submit())
        self._task.add_done_callback(_log_failure)
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
