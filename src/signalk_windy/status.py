"""Human-readable status line for the host status surface."""

from __future__ import annotations

from datetime import datetime

from signalk_windy.ingestion.normalize import ms_to_knots
from signalk_windy.state.buffer import ObservationBuffer

# (bucket size in seconds, unit, singular unit or None when always plural)
_BUCKETS: tuple[tuple[int, str, str | None], ...] = (
    (31_536_000, "years", None),
    (2_592_000, "months", None),
    (86_400, "days", None),
    (3_600, "hours", "hour"),
    (60, "minutes", "minute"),
)


def time_since(seconds: float) -> str:
    """Describe an elapsed time using its largest unit, e.g. ``"2 hours"``.

    A unit is used once the elapsed time exceeds one whole unit, so exactly
    3600 seconds is still ``"60 minutes"``.
    """
    total = int(seconds)
    for size, plural, singular in _BUCKETS:
        if total / size > 1:
            count = total // size
            if count == 1 and singular is not None:
                return f"{count} {singular}"
            return f"{count} {plural}"
    return f"{total} seconds"


def status_message(buffer: ObservationBuffer, now: datetime) -> str:
    if buffer.last_successful_update is not None:
        elapsed = (now - buffer.last_successful_update).total_seconds()
        message = f"Successful submission {time_since(elapsed)} ago."
    else:
        message = "No data has been submitted yet."

    speed = buffer.latest_wind_speed
    if speed is not None and buffer.wind_gust is not None:
        message += f" Wind speed is {ms_to_knots(speed)}kts and gust is {ms_to_knots(buffer.wind_gust)}kts."
    return message
