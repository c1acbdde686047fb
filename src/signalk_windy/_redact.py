"""Helpers for safe debug logging.

The Windy API key travels inside the request URL and inside the plugin
options. These helpers keep it out of log output.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_OPTION_KEYS: frozenset[str] = frozenset({"apikey", "api_key", "token"})

REDACTED = "<redacted>"


def redact_secret(text: str, secret: str | None) -> str:
    """Replace every occurrence of *secret* in *text*."""
    if not secret:
        return text
    return text.replace(secret, REDACTED)


def redact_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of a flat options mapping with non-empty secret values replaced."""
    return {
        key: REDACTED if key.lower() in _SENSITIVE_OPTION_KEYS and value else value
        for key, value in options.items()
    }
