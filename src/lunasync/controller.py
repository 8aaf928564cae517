"""Configuration synchronization between the form, the store and the device."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from lunasync._constants import EVENT_APP_MESSAGE, EVENT_READY, EVENT_SHOW_CONFIGURATION, EVENT_WEBVIEW_CLOSED
from lunasync._transport import DeviceTransport
from lunasync.config import LunaConfig
from lunasync.exceptions import LunaError
from lunasync.location import LocationWatcher
from lunasync.models.record import ConfigSubmission, ConfigurationRecord
from lunasync.store import PersistedConfigStore

_logger = logging.getLogger(__name__)


class ConfigSyncController:
    """Own the in-memory configuration and react to host lifecycle events.

    Configuration only reaches the device after the form has been
    submitted; ``ready`` and ``appmessage`` only request a position fix
    (unless ``config.propagate_on_ready`` is set).
    """

    def __init__(
        self,
        store: PersistedConfigStore,
        transport: DeviceTransport,
        watcher: LocationWatcher,
        *,
        config: LunaConfig | None = None,
    ) -> None:
        self._config = config or LunaConfig()
        self._store = store
        self._transport = transport
        self._watcher = watcher
        self._snapshot = ConfigurationRecord(configure_url=self._config.configure_url)
        self._handlers: dict[str, Callable[[Mapping[str, Any]], None]] = {
            EVENT_READY: lambda _payload: self.on_ready(),
            EVENT_APP_MESSAGE: lambda _payload: self.on_refresh_requested(),
            EVENT_SHOW_CONFIGURATION: lambda _payload: self.on_configuration_requested(),
            EVENT_WEBVIEW_CLOSED: lambda payload: self.on_webview_result(payload.get("response")),
        }

    @property
    def config(self) -> ConfigurationRecord:
        """The current in-memory configuration."""
        return self._snapshot

    @property
    def watcher(self) -> LocationWatcher:
        return self._watcher

    # ------------------------------------------------------------------
    # Lifecycle events
    # ------------------------------------------------------------------

    def on_ready(self) -> None:
        _logger.info("luna is ready")
        self._watcher.request_fix()
        if self._config.propagate_on_ready:
            self._snapshot = self._store.load()
            self.propagate()

    def on_refresh_requested(self) -> None:
        self._watcher.request_fix()

    def on_configuration_requested(self) -> None:
        self._transport.open_url(self._snapshot.configure_url)

    def on_webview_result(self, response: str | None) -> None:
        """Absorb a configuration form result.

        An empty or missing response is ignored. A malformed one raises
        :class:`~lunasync.exceptions.WebviewResultError` before anything is
        written.
        """
        if not response:
            return
        submission = ConfigSubmission.parse(response)
        self._store.save(submission)
        self._snapshot = self._store.load()
        self.propagate()

    def propagate(self) -> Any:
        """Send the full configuration to the device; returns the transaction id."""
        message = self._snapshot.to_message()
        _logger.debug("Configuration window returned: %s", message)
        return self._transport.send_message(message)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def handle_event(self, name: str, payload: Mapping[str, Any] | None = None) -> None:
        """Route a host event by name.

        Errors raised by a handler are logged and the event is dropped.
        """
        handler = self._handlers.get(name)
        if handler is None:
            _logger.debug("Ignoring unknown event %r", name)
            return
        try:
            handler(payload or {})
        except LunaError:
            _logger.warning("Dropped %s event", name, exc_info=True)
