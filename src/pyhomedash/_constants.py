"""Internal constants shared across the library."""

USER_AGENT = "pyhomedash/0.1"
REST_PATH = "/rest/v1"

#: The control record is a singleton row with this identity.
CONTROL_ID = 1

DEFAULT_SENSOR_TABLE = "sensor_data"
DEFAULT_CONTROLS_TABLE = "controls"

DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_ERROR_TTL = 3.0
DEFAULT_REQUEST_TIMEOUT = 10.0

GENERIC_CONTROL_ERROR = "Failed to update controls. Please try again."

#: Rendered in place of a reading that has never been observed.
UNKNOWN_PLACEHOLDER = "--"
