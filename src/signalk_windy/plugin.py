"""Plugin lifecycle: subscription, submit timer and status timer."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any, Protocol

import aiohttp

from signalk_windy._constants import STATUS_INTERVAL_S
from signalk_windy._redact import redact_options
from signalk_windy._transport import Transport, WindyTransport
from signalk_windy.config import WindyConfig
from signalk_windy.exceptions import SignalKError, WindyConfigError
from signalk_windy.ingestion.delta import Ingestor
from signalk_windy.ingestion.paths import build_path_map, build_subscription
from signalk_windy.state.buffer import ObservationBuffer
from signalk_windy.status import status_message
from signalk_windy.submit import Submitter

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Host(Protocol):
    """What the plugin needs from the process delivering Signal K data.

    :class:`signalk_windy.signalk.SignalKHost` implements it against a
    Signal K server; tests use in-memory doubles.
    """

    def subscribe(
        self,
        subscription: Mapping[str, Any],
        on_delta: Callable[[Mapping[str, Any]], None],
    ) -> Callable[[], None]:
        """Register *on_delta* for *subscription*; returns an unsubscribe callable."""
        ...

    def set_status(self, message: str) -> None:
        ...

    async def get_self_path(self, path: str) -> Any:
        ...


PLUGIN_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["apiKey", "submitInterval", "stationId"],
    "properties": {
        "apiKey": {"type": "string", "title": "API Key (obtain from stations.windy.com)"},
        "submitInterval": {"type": "number", "title": "Submit Interval (minutes)", "default": 5},
        "stationId": {"type": "number", "title": "Windy.com Station ID", "default": 100},
        "provider": {"type": "string", "title": "Provider", "default": ""},
        "url": {"type": "string", "title": "Web Site", "default": ""},
        "paths": {
            "type": "object",
            "title": "Signal K Paths",
            "properties": {
                "position": {
                    "type": "string",
                    "title": "Position Path",
                    "default": "navigation.position",
                },
                "windDirection": {
                    "type": "string",
                    "title": "Wind Direction Path",
                    "default": "environment.wind.directionGround",
                },
                "windSpeed": {
                    "type": "string",
                    "title": "Wind Speed Path",
                    "default": "environment.wind.speedOverGround",
                },
                "waterTemperature": {
                    "type": "string",
                    "title": "Water Temperature Path",
                    "default": "environment.water.temperature",
                },
                "outsideTemperature": {
                    "type": "string",
                    "title": "Outside Temperature Path",
                    "default": "environment.outside.temperature",
                },
                "pressure": {
                    "type": "string",
                    "title": "Pressure Path",
                    "default": "environment.outside.pressure",
                },
                "humidity": {
                    "type": "string",
                    "title": "Humidity Path",
                    "default": "environment.outside.humidity",
                },
            },
        },
    },
}


class WindyPlugin:
    """Relays Signal K weather data to a Windy.com station.

    Usage::

        plugin = WindyPlugin(host)
        await plugin.start({"apiKey": "...", "stationId": 1})
        ...
        await plugin.stop()
    """

    id = "signalk-windy"
    name = "SignalK Windy.com"
    description = "Windy.com plugin for Signal K"
    schema = PLUGIN_SCHEMA

    def __init__(
        self,
        host: Host,
        *,
        transport: Transport | None = None,
        http_session: aiohttp.ClientSession | None = None,
        clock: Callable[[], datetime] = _utcnow,
        status_interval: float = STATUS_INTERVAL_S,
    ) -> None:
        self._host = host
        self._transport = transport
        self._http_session = http_session
        self._owns_session = False
        self._clock = clock
        self._status_interval = status_interval
        self._config: WindyConfig | None = None
        self._buffer = ObservationBuffer()
        self._ingestor: Ingestor | None = None
        self._submitter: Submitter | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def buffer(self) -> ObservationBuffer:
        return self._buffer

    @property
    def config(self) -> WindyConfig | None:
        return self._config

    @property
    def is_running(self) -> bool:
        return bool(self._tasks)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self, options: Mapping[str, Any] | WindyConfig) -> None:
        """Validate *options*, subscribe and start both timers.

        Raises :class:`WindyConfigError` before touching the host when the
        API key is missing or a setting is invalid.
        """
        if self.is_running:
            await self.stop()

        if isinstance(options, WindyConfig):
            config = options
        else:
            _logger.debug("Starting with options %s", redact_options(options))
            config = WindyConfig.from_options(options)
        try:
            config.validate()
        except WindyConfigError as exc:
            _logger.error("%s", exc)
            raise
        self._config = config

        self._host.set_status(f"Submitting weather report every {config.submit_interval:g} minutes")

        self._buffer = ObservationBuffer()
        self._ingestor = Ingestor(self._buffer, build_path_map(config.paths))
        self._submitter = Submitter(
            config,
            self._buffer,
            self._ensure_transport(config),
            name=await self._vessel_name(),
            clock=self._clock,
        )

        self._unsubscribe = self._host.subscribe(build_subscription(config.paths), self.handle_delta)

        _logger.debug("Starting submission process every %s minutes", config.submit_interval)
        self._tasks = [
            asyncio.create_task(self._every(self._status_interval, self.report_status)),
            asyncio.create_task(self._every(config.submit_interval_seconds, self._submitter.schedule)),
        ]

    async def stop(self) -> None:
        """Cancel both timers and any in-flight submission, then unsubscribe."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task

        if self._submitter is not None:
            self._submitter.cancel()

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        if self._owns_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None
            self._owns_session = False

        self._host.set_status("Plugin stopped")

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def handle_delta(self, delta: Mapping[str, Any]) -> None:
        if self._ingestor is None:
            return
        self._ingestor.process_delta(delta)

    def report_status(self) -> None:
        self._host.set_status(status_message(self._buffer, self._clock()))

    async def submit_now(self) -> bool:
        """Run one submit cycle immediately and wait for the outcome."""
        if self._submitter is None:
            raise WindyConfigError("Plugin not started")
        return await self._submitter.submit()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_transport(self, config: WindyConfig) -> Transport:
        if self._transport is not None:
            return self._transport
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
            self._owns_session = True
        self._transport = WindyTransport(self._http_session, timeout=config.request_timeout)
        return self._transport

    async def _vessel_name(self) -> str | None:
        try:
            value = await self._host.get_self_path("name")
        except SignalKError as exc:
            _logger.warning("Could not look up vessel name: %s", exc)
            return None
        return str(value) if value else None

    @staticmethod
    async def _every(interval: float, callback: Callable[[], Any]) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                callback()
            except Exception:
                _logger.exception("Timer callback %s failed", getattr(callback, "__name__", callback))
