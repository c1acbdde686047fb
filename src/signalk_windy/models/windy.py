"""Windy.com station update payload."""

from __future__ import annotations

from pydantic import Field

from signalk_windy._constants import SHARE_OPTION, STATION_ELEVATION, STATION_TYPE
from signalk_windy.models._base import WindyBaseModel


class StationDescriptor(WindyBaseModel):
    """Station metadata sent alongside every observation.

    Parameters
    ----------
    station : int
        Windy.com station ID.
    name : str or None
        Display name (the vessel name).
    lat, lon : float
        Current vessel position.
    """

    station: int
    name: str | None = None
    share_option: str = SHARE_OPTION
    type: str = STATION_TYPE
    provider: str = ""
    url: str = ""
    lat: float
    lon: float
    elevation: int = STATION_ELEVATION


class WindObservation(WindyBaseModel):
    """One aggregated observation.

    Units: ``temp`` in degrees Celsius, ``wind``/``gust`` in m/s,
    ``winddir`` in degrees, ``rh`` in percent.
    """

    station: int
    temp: float
    wind: float
    gust: float | None = None
    winddir: int
    pressure: float | None = None
    rh: int | None = None


class WindyUpdate(WindyBaseModel):
    """Request body for ``POST /pws/update/{api_key}``."""

    stations: list[StationDescriptor] = Field(default_factory=list)
    observations: list[WindObservation] = Field(default_factory=list)
