from __future__ import annotations

from typing import Any

import aiohttp
import pytest

from signalk_windy._transport import WindyTransport
from signalk_windy.exceptions import WindyTransportError


class _FakeResponse:
    def __init__(self, status: int, body: str | bytes) -> None:
        self.status = status
        self._body = body.encode() if isinstance(body, str) else body

    async def text(self, encoding: str | None = None, errors: str = "strict") -> str:
        return self._body.decode(encoding or "utf-8", errors)

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class _FakeSession:
    def __init__(self, response: _FakeResponse | None = None, error: Exception | None = None) -> None:
        self._response = response
        self._error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def post(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append((url, kwargs))
        if self._error is not None:
            raise self._error
        assert self._response is not None
        return self._response


@pytest.mark.asyncio
async def test_post_update_sends_json_to_key_url() -> None:
    session = _FakeSession(_FakeResponse(200, "SUCCESS"))
    transport = WindyTransport(session, timeout=5.0)  # type: ignore[arg-type]

    text = await transport.post_update("abc123", {"stations": [], "observations": []})

    assert text == "SUCCESS"
    url, kwargs = session.calls[0]
    assert url == "https://stations.windy.com./pws/update/abc123"
    assert kwargs["json"] == {"stations": [], "observations": []}
    assert kwargs["timeout"].total == 5.0


@pytest.mark.asyncio
async def test_non_200_raises_with_status_and_body() -> None:
    session = _FakeSession(_FakeResponse(400, "Invalid station"))
    transport = WindyTransport(session)  # type: ignore[arg-type]

    with pytest.raises(WindyTransportError) as exc_info:
        await transport.post_update("abc123", {})

    exc = exc_info.value
    assert exc.status_code == 400
    assert exc.body == "Invalid station"
    assert "Invalid station" in str(exc)


@pytest.mark.asyncio
async def test_network_error_is_wrapped_without_leaking_key() -> None:
    session = _FakeSession(error=aiohttp.ClientConnectionError("cannot reach /pws/update/abc123"))
    transport = WindyTransport(session)  # type: ignore[arg-type]

    with pytest.raises(WindyTransportError) as exc_info:
        await transport.post_update("abc123", {})

    exc = exc_info.value
    assert exc.status_code is None
    assert "abc123" not in str(exc)
    assert isinstance(exc.__cause__, aiohttp.ClientConnectionError)


@pytest.mark.asyncio
async def test_undecodable_200_body_still_succeeds() -> None:
    session = _FakeSession(_FakeResponse(200, b"\xff\xfe OK \x80"))
    transport = WindyTransport(session)  # type: ignore[arg-type]

    text = await transport.post_update("abc123", {})

    assert "OK" in text


@pytest.mark.asyncio
async def test_undecodable_error_body_raises_transport_error() -> None:
    session = _FakeSession(_FakeResponse(502, b"\x80 bad gateway"))
    transport = WindyTransport(session)  # type: ignore[arg-type]

    with pytest.raises(WindyTransportError) as exc_info:
        await transport.post_update("abc123", {})

    assert exc_info.value.status_code == 502
    assert "bad gateway" in exc_info.value.body
