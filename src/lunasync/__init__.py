"""lunasync - Companion-side configuration and location bridge for the Luna watchface."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("lunasync")
except PackageNotFoundError:
    __version__ = "0+local"
from lunasync._location_http import HttpLocationProvider
from lunasync._transport import DeviceTransport, MqttDeviceTransport
from lunasync.bridge import LunaBridge
from lunasync.config import LunaConfig
from lunasync.controller import ConfigSyncController
from lunasync.exceptions import (
    LocationUnavailableError,
    LunaConfigError,
    LunaError,
    LunaTransportError,
    WebviewResultError,
)
from lunasync.ingestion.normalize import coerce_int_or_default
from lunasync.location import LocationProvider, LocationWatcher
from lunasync.models import (
    ConfigSubmission,
    ConfigurationRecord,
    LocationOptions,
    OutboundMessage,
    Position,
)
from lunasync.storage import JsonFileStore, KeyValueStore, MemoryStore
from lunasync.store import PersistedConfigStore

__all__ = [
    "__version__",
    "ConfigSubmission",
    "ConfigSyncController",
    "ConfigurationRecord",
    "DeviceTransport",
    "HttpLocationProvider",
    "JsonFileStore",
    "KeyValueStore",
    "LocationOptions",
    "LocationProvider",
    "LocationUnavailableError",
    "LocationWatcher",
    "LunaBridge",
    "LunaConfig",
    "LunaConfigError",
    "LunaError",
    "LunaTransportError",
    "MemoryStore",
    "MqttDeviceTransport",
    "OutboundMessage",
    "PersistedConfigStore",
    "Position",
    "WebviewResultError",
    "coerce_int_or_default",
]
