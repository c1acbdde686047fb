"""HTTP transport for the Windy.com station update endpoint."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from signalk_windy._constants import API_BASE
from signalk_windy._redact import redact_secret
from signalk_windy.exceptions import WindyTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the submitter.

    Tests pass doubles through this protocol while production code uses
    :class:`WindyTransport`.
    """

    async def post_update(self, api_key: str, payload: Mapping[str, Any]) -> str:
        ...


class WindyTransport:
    """Posts station updates as JSON and maps failures to :class:`WindyTransportError`."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        base_url: str = API_BASE,
        timeout: float = 30.0,
    ) -> None:
        self._http = http_session
        self._base_url = base_url
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def post_update(self, api_key: str, payload: Mapping[str, Any]) -> str:
        """POST *payload* to ``{base_url}{api_key}`` and return the response text.

        Anything other than HTTP 200 raises :class:`WindyTransportError`
        carrying the status code and the (truncated) body.
        """
        url = f"{self._base_url}{api_key}"
        _logger.debug("POST %s", redact_secret(url, api_key))

        try:
            async with self._http.post(url, json=dict(payload), timeout=self._timeout) as resp:
                text = await resp.text(errors="replace")
                if resp.status != 200:
                    raise WindyTransportError(
                        f"HTTP {resp.status} from Windy.com: {text[:200]}",
                        status_code=resp.status,
                        body=text,
                    )
        except WindyTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise WindyTransportError(
                f"Request to Windy.com failed: {redact_secret(str(exc), api_key)}",
            ) from exc

        return text
