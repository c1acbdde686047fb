"""Relay configuration for signalk-windy."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from signalk_windy._constants import (
    DEFAULT_REQUEST_TIMEOUT_S,
    DEFAULT_STATION_ID,
    DEFAULT_SUBMIT_INTERVAL_MIN,
)
from signalk_windy.exceptions import WindyConfigError


def _parse_number(value: Any, name: str, cast: type[int] | type[float]) -> Any:
    if isinstance(value, bool):
        raise WindyConfigError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise WindyConfigError(f"{name} must be a number, got {value!r}") from exc
    if cast is int:
        if not number.is_integer():
            raise WindyConfigError(f"{name} must be a whole number, got {value!r}")
        return int(number)
    return number


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclasses.dataclass(frozen=True)
class SignalKPaths:
    """Optional overrides for the seven subscribed Signal K paths.

    ``None`` means only the default path is used for that field.
    """

    position: str | None = None
    wind_direction: str | None = None
    wind_speed: str | None = None
    water_temperature: str | None = None
    outside_temperature: str | None = None
    pressure: str | None = None
    humidity: str | None = None

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None) -> SignalKPaths:
        """Build overrides from the camelCase ``paths`` object of plugin options."""
        if not options:
            return cls()
        if not isinstance(options, Mapping):
            raise WindyConfigError(f"paths must be an object, got {type(options).__name__}")
        return cls(
            position=_optional_str(options.get("position")),
            wind_direction=_optional_str(options.get("windDirection")),
            wind_speed=_optional_str(options.get("windSpeed")),
            water_temperature=_optional_str(options.get("waterTemperature")),
            outside_temperature=_optional_str(options.get("outsideTemperature")),
            pressure=_optional_str(options.get("pressure")),
            humidity=_optional_str(options.get("humidity")),
        )


@dataclasses.dataclass(frozen=True)
class WindyConfig:
    """Relay configuration.

    Parameters
    ----------
    api_key : str
        Windy.com station API key (from stations.windy.com). Required.
    submit_interval : float
        Minutes between submissions.
    station_id : int
        Windy.com station ID.
    provider : str
        Provider name shown on the station page.
    url : str
        Web site shown on the station page.
    paths : SignalKPaths
        Signal K path overrides.
    request_timeout : float
        Total timeout in seconds for one submission request.
    signalk_url : str
        Base URL of the Signal K server used by the standalone host.
    signalk_token : str or None
        Optional bearer token for Signal K servers with security enabled.
    """

    api_key: str = ""
    submit_interval: float = DEFAULT_SUBMIT_INTERVAL_MIN
    station_id: int = DEFAULT_STATION_ID
    provider: str = ""
    url: str = ""
    paths: SignalKPaths = dataclasses.field(default_factory=SignalKPaths)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_S
    signalk_url: str = "http://localhost:3000"
    signalk_token: str | None = None

    def validate(self) -> None:
        """Raise :class:`WindyConfigError` when the configuration is unusable."""
        if not self.api_key or not self.api_key.strip():
            raise WindyConfigError("API Key is required")
        if self.submit_interval <= 0:
            raise WindyConfigError(f"submit_interval must be positive, got {self.submit_interval}")
        if self.request_timeout <= 0:
            raise WindyConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    @property
    def submit_interval_seconds(self) -> float:
        return self.submit_interval * 60

    @classmethod
    def from_options(cls, options: Mapping[str, Any], **overrides: Any) -> WindyConfig:
        """Create configuration from host-style plugin options.

        Keys follow the plugin schema (``apiKey``, ``submitInterval``,
        ``stationId``, ``provider``, ``url``, ``paths``). Missing keys fall
        back to the schema defaults. No validation happens here; call
        :meth:`validate` before use.
        """
        kwargs: dict[str, Any] = {
            "api_key": str(options.get("apiKey") or ""),
            "provider": str(options.get("provider") or ""),
            "url": str(options.get("url") or ""),
            "paths": SignalKPaths.from_options(options.get("paths")),
        }
        if options.get("submitInterval") is not None:
            kwargs["submit_interval"] = _parse_number(options["submitInterval"], "submitInterval", float)
        if options.get("stationId") is not None:
            kwargs["station_id"] = _parse_number(options["stationId"], "stationId", int)
        kwargs.update(overrides)
        return cls(**kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> WindyConfig:
        """Create configuration from environment variables.

        Reads ``SIGNALK_WINDY_API_KEY`` and the optional ``SIGNALK_WINDY_*``
        variables. Path overrides use ``SIGNALK_WINDY_PATH_<FIELD>``.
        Explicit keyword arguments override environment values.
        """
        env = os.environ

        path_kwargs: dict[str, str] = {}
        for field in dataclasses.fields(SignalKPaths):
            val = env.get(f"SIGNALK_WINDY_PATH_{field.name.upper()}")
            if val:
                path_kwargs[field.name] = val

        path_overrides = overrides.pop("paths", None)
        if isinstance(path_overrides, dict):
            path_kwargs.update(path_overrides)
        elif isinstance(path_overrides, SignalKPaths):
            path_kwargs = dataclasses.asdict(path_overrides)

        _ENV_CONFIG_MAP = {
            "SIGNALK_WINDY_API_KEY": "api_key",
            "SIGNALK_WINDY_PROVIDER": "provider",
            "SIGNALK_WINDY_URL": "url",
            "SIGNALK_WINDY_SIGNALK_URL": "signalk_url",
            "SIGNALK_WINDY_SIGNALK_TOKEN": "signalk_token",
        }
        config_kwargs: dict[str, Any] = {"paths": SignalKPaths(**path_kwargs)}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
            "SIGNALK_WINDY_SUBMIT_INTERVAL": ("submit_interval", float),
            "SIGNALK_WINDY_STATION_ID": ("station_id", int),
            "SIGNALK_WINDY_REQUEST_TIMEOUT": ("request_timeout", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _parse_number(val, env_key, cast)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
