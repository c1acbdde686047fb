"""Standalone Signal K host: stream subscription, REST lookups and status."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Coroutine, Mapping
from typing import Any

import aiohttp

from signalk_windy.config import WindyConfig
from signalk_windy.exceptions import SignalKError

_logger = logging.getLogger(__name__)

STREAM_PATH = "/signalk/v1/stream"
API_PATH = "/signalk/v1/api"


def stream_url(base_url: str) -> str:
    """WebSocket stream URL for a server base URL (``http`` -> ``ws``).

    ``subscribe=none`` stops the server from sending every self path; only
    explicitly subscribed paths are delivered.
    """
    base = base_url.rstrip("/")
    if base.startswith("https://"):
        base = "wss://" + base[len("https://") :]
    elif base.startswith("http://"):
        base = "ws://" + base[len("http://") :]
    return f"{base}{STREAM_PATH}?subscribe=none"


def self_path_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}{API_PATH}/vessels/self/{path.replace('.', '/')}"


class _Subscription:
    __slots__ = ("message", "on_delta")

    def __init__(self, message: Mapping[str, Any], on_delta: Callable[[Mapping[str, Any]], None]) -> None:
        self.message = dict(message)
        self.on_delta = on_delta


class SignalKHost:
    """Delivers Signal K deltas to subscribers over the WebSocket stream API.

    Subscriptions are remembered and re-sent after every (re)connect, so a
    plugin subscribed once keeps receiving data across server restarts.
    The status surface is the log.
    """

    def __init__(
        self,
        config: WindyConfig,
        http_session: aiohttp.ClientSession,
        *,
        reconnect_delay: float = 5.0,
    ) -> None:
        self._config = config
        self._http = http_session
        self._reconnect_delay = reconnect_delay
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._subscriptions: list[_Subscription] = []
        self._pending: set[asyncio.Task[None]] = set()
        self.status: str | None = None

    @property
    def connected(self) -> bool:
        return self._ws is not None and not self._ws.closed

    def _headers(self) -> dict[str, str]:
        if self._config.signalk_token:
            return {"Authorization": f"Bearer {self._config.signalk_token}"}
        return {}

    # ------------------------------------------------------------------
    # Host protocol
    # ------------------------------------------------------------------

    def subscribe(
        self,
        subscription: Mapping[str, Any],
        on_delta: Callable[[Mapping[str, Any]], None],
    ) -> Callable[[], None]:
        entry = _Subscription(subscription, on_delta)
        self._subscriptions.append(entry)
        if self.connected:
            self._spawn(self._send(entry.message))

        def unsubscribe() -> None:
            if entry not in self._subscriptions:
                return
            self._subscriptions.remove(entry)
            if self.connected:
                paths = [item.get("path") for item in entry.message.get("subscribe", [])]
                self._spawn(
                    self._send(
                        {
                            "context": entry.message.get("context", "vessels.self"),
                            "unsubscribe": [{"path": path} for path in paths],
                        }
                    )
                )

        return unsubscribe

    def set_status(self, message: str) -> None:
        if message != self.status:
            _logger.info("%s", message)
        self.status = message

    async def get_self_path(self, path: str) -> Any:
        """Fetch ``vessels.self.<path>`` over REST; ``None`` if the server has no value."""
        url = self_path_url(self._config.signalk_url, path)
        try:
            async with self._http.get(url, headers=self._headers()) as resp:
                if resp.status == 404:
                    return None
                if resp.status != 200:
                    text = await resp.text(errors="replace")
                    raise SignalKError(f"HTTP {resp.status} from {url}: {text[:200]}", status_code=resp.status)
                body = await resp.json(content_type=None)
        except SignalKError:
            raise
        except (aiohttp.ClientError, json.JSONDecodeError) as exc:
            raise SignalKError(f"Request to {url} failed: {exc}") from exc

        # Leaf values come back either bare or wrapped as {"value": ..., "$source": ...}.
        if isinstance(body, dict) and "value" in body:
            return body["value"]
        return body

    # ------------------------------------------------------------------
    # Stream lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the stream and (re-)send every registered subscription."""
        url = stream_url(self._config.signalk_url)
        _logger.debug("Connecting to %s", url)
        try:
            self._ws = await self._http.ws_connect(url, headers=self._headers(), heartbeat=30.0)
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise SignalKError(f"Could not connect to {url}: {exc}") from exc
        for entry in list(self._subscriptions):
            await self._send(entry.message)

    async def run(self) -> None:
        """Dispatch incoming deltas until the stream closes."""
        ws = self._ws
        if ws is None:
            raise SignalKError("Not connected. Call connect() first")
        async for msg in ws:
            if msg.type == aiohttp.WSMsgType.TEXT:
                self.dispatch(msg.data)
            elif msg.type == aiohttp.WSMsgType.ERROR:
                raise SignalKError(f"Stream error: {ws.exception()}")
        _logger.debug("Stream closed by server (code=%s)", ws.close_code)

    async def run_forever(self) -> None:
        """Keep the stream running, reconnecting after failures."""
        while True:
            try:
                if not self.connected:
                    await self.connect()
                await self.run()
            except SignalKError as exc:
                _logger.warning("%s", exc)
            self._ws = None
            await asyncio.sleep(self._reconnect_delay)

    async def close(self) -> None:
        for task in list(self._pending):
            task.cancel()
        if self._ws is not None:
            await self._ws.close()
            self._ws = None

    def dispatch(self, text: str) -> None:
        """Decode one stream message and hand it to every subscriber."""
        try:
            message = json.loads(text)
        except json.JSONDecodeError:
            _logger.debug("Ignoring non-JSON stream message: %s", text[:200])
            return
        if not isinstance(message, dict) or "updates" not in message:
            # hello message or request reply
            return
        for entry in list(self._subscriptions):
            entry.on_delta(message)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _send(self, message: Mapping[str, Any]) -> None:
        if self._ws is None or self._ws.closed:
            return
        try:
            await self._ws.send_json(dict(message))
        except (aiohttp.ClientError, ConnectionResetError) as exc:
            _logger.debug("Could not send %s: %s", message, exc)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
