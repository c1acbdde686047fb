"""signalk-windy - Relay Signal K weather data to Windy.com stations."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("signalk-windy")
except PackageNotFoundError:
    __version__ = "0+local"
from signalk_windy._transport import WindyTransport
from signalk_windy.config import SignalKPaths, WindyConfig
from signalk_windy.exceptions import (
    SignalKError,
    WindyConfigError,
    WindyError,
    WindyTransportError,
)
from signalk_windy.models import (
    Delta,
    Position,
    StationDescriptor,
    WindObservation,
    WindyUpdate,
)
from signalk_windy.plugin import Host, WindyPlugin
from signalk_windy.signalk import SignalKHost
from signalk_windy.state import ObservationBuffer

__all__ = [
    "__version__",
    "Delta",
    "Host",
    "ObservationBuffer",
    "Position",
    "SignalKError",
    "SignalKHost",
    "SignalKPaths",
    "StationDescriptor",
    "WindObservation",
    "WindyConfig",
    "WindyConfigError",
    "WindyError",
    "WindyPlugin",
    "WindyTransport",
    "WindyTransportError",
    "WindyUpdate",
]
