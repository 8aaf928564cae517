"""Internal constants shared across the library."""

CONFIGURE_URL = "http://goo.gl/fou7kz"

# ------------------------------------------------------------------
# Store / full-configuration message keys
# ------------------------------------------------------------------

KEY_TZ1_NAME = "TZ1Name"
KEY_TZ1 = "TZ1"
KEY_TZ2_NAME = "TZ2Name"
KEY_TZ2 = "TZ2"
KEY_TZSS = "TZSS"
KEY_CONFIG_LATITUDE = "LATITUDE"
KEY_CONFIG_LONGITUDE = "LONGITUDE"
KEY_INVERT = "invert"
KEY_DMY = "dmy"
KEY_LANG = "lang"

NAME_KEYS: tuple[str, ...] = (KEY_TZ1_NAME, KEY_TZ2_NAME)

INT_KEYS: tuple[str, ...] = (
    KEY_TZ1,
    KEY_TZ2,
    KEY_CONFIG_LATITUDE,
    KEY_CONFIG_LONGITUDE,
    KEY_TZSS,
    KEY_INVERT,
    KEY_DMY,
    KEY_LANG,
)

# Order of the full-configuration message.
CONFIG_KEYS: tuple[str, ...] = (
    KEY_TZ1_NAME,
    KEY_TZ1,
    KEY_TZ2_NAME,
    KEY_TZ2,
    KEY_TZSS,
    KEY_CONFIG_LATITUDE,
    KEY_CONFIG_LONGITUDE,
    KEY_INVERT,
    KEY_DMY,
    KEY_LANG,
)

# ------------------------------------------------------------------
# Location-update message keys (live fix, independent of LATITUDE/LONGITUDE)
# ------------------------------------------------------------------

KEY_LIVE_LONGITUDE = "KEY_LONGITUDE"
KEY_LIVE_LATITUDE = "KEY_LATITUDE"

# ------------------------------------------------------------------
# Host lifecycle events
# ------------------------------------------------------------------

EVENT_READY = "ready"
EVENT_APP_MESSAGE = "appmessage"
EVENT_SHOW_CONFIGURATION = "showConfiguration"
EVENT_WEBVIEW_CLOSED = "webviewclosed"

DEFAULT_LOCATION_TIMEOUT = 60.0
DEFAULT_LOCATION_MAXIMUM_AGE = 0.0
