"""High-level async entry point wiring the controller to its adapters."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from lunasync._location_http import HttpLocationProvider
from lunasync._transport import DeviceTransport, MqttDeviceTransport
from lunasync.config import LunaConfig
from lunasync.controller import ConfigSyncController
from lunasync.exceptions import LunaConfigError
from lunasync.location import LocationProvider, LocationWatcher
from lunasync.storage import JsonFileStore, KeyValueStore, MemoryStore
from lunasync.store import PersistedConfigStore

_logger = logging.getLogger(__name__)


class LunaBridge:
    """Companion-side bridge for the Luna watchface.

    Collaborators that are not passed in are built from ``config``.

    Usage::

        async with LunaBridge(LunaConfig.from_env()) as bridge:
            bridge.dispatch("ready")
    """

    def __init__(
        self,
        config: LunaConfig,
        *,
        store: KeyValueStore | None = None,
        transport: DeviceTransport | None = None,
        location_provider: LocationProvider | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._transport = transport
        self._location_provider = location_provider
        self._external_session = session is not None
        self._http_session = session
        self._owned_mqtt: MqttDeviceTransport | None = None
        self._controller: ConfigSyncController | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> LunaBridge:
        store = self._store if self._store is not None else self._build_store()
        transport = self._transport if self._transport is not None else self._build_transport()
        try:
            provider = self._location_provider or self._build_location_provider()
        except LunaConfigError:
            self._stop_mqtt()
            raise

        watcher = LocationWatcher(provider, transport, options=self._config.location_options())
        self._controller = ConfigSyncController(
            PersistedConfigStore(store, configure_url=self._config.configure_url),
            transport,
            watcher,
            config=self._config,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._controller is not None:
            await self._controller.watcher.close()
            self._controller = None
        self._stop_mqtt()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Collaborator construction
    # ------------------------------------------------------------------

    def _build_store(self) -> KeyValueStore:
        if self._config.store_path:
            _logger.debug("Using JSON file store at %s", self._config.store_path)
            return JsonFileStore(self._config.store_path)
        return MemoryStore()

    def _build_transport(self) -> DeviceTransport:
        if not self._config.mqtt_host:
            raise LunaConfigError("No device transport given and config.mqtt_host is not set")
        transport = MqttDeviceTransport(self._config)
        transport.start()
        self._owned_mqtt = transport
        return transport

    def _build_location_provider(self) -> LocationProvider:
        if not self._config.location_url:
            raise LunaConfigError("No location provider given and config.location_url is not set")
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return HttpLocationProvider(self._config.location_url, self._http_session)

    def _stop_mqtt(self) -> None:
        if self._owned_mqtt is not None:
            self._owned_mqtt.stop()
            self._owned_mqtt = None

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    @property
    def controller(self) -> ConfigSyncController:
        if self._controller is None:
            raise LunaConfigError("Bridge not started. Use 'async with LunaBridge(...) as bridge:'")
        return self._controller

    def dispatch(self, name: str, payload: Mapping[str, Any] | None = None) -> None:
        """Forward a host lifecycle event to the controller."""
        self.controller.handle_event(name, payload)
