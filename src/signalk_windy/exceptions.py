"""Custom exception hierarchy for signalk-windy."""

from __future__ import annotations


class WindyError(Exception):
    """Base exception for all signalk-windy errors."""


class WindyConfigError(WindyError):
    """Invalid or missing configuration."""


class WindyTransportError(WindyError):
    """Submission failure (network error or non-200 reply)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class SignalKError(WindyError):
    """Failure talking to the Signal K server (stream or REST API)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
