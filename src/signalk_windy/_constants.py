"""Internal constants shared across the package."""

API_BASE = "https://stations.windy.com./pws/update/"
STATION_TYPE = "Boat (powered by Saillogger.com Signal K plugin)"
SHARE_OPTION = "Open"
STATION_ELEVATION = 1

SELF_CONTEXT = "vessels.self"
POLL_INTERVAL_MS = 1000
STATUS_INTERVAL_S = 5.0

DEFAULT_SUBMIT_INTERVAL_MIN = 5.0
DEFAULT_STATION_ID = 100
DEFAULT_REQUEST_TIMEOUT_S = 30.0

# ------------------------------------------------------------------
# Unit conversion factors
# ------------------------------------------------------------------

RAD_TO_DEG = 57.2958
KELVIN_OFFSET = 273.15
MS_TO_KNOTS = 1.94384
