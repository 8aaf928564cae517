"""Location-change notifier.

A fix is requested on demand, rounded to whole degrees and compared
against the last rounded position. The device only hears about a fix when
either rounded coordinate changed; it then receives the raw coordinates.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from lunasync._transport import DeviceTransport
from lunasync.exceptions import LocationUnavailableError, LunaTransportError
from lunasync.models.location import LocationOptions, Position

_logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    """Structural interface for a single-shot position request."""

    async def current_position(self, options: LocationOptions) -> Position:
        ...


class LocationWatcher:
    """Request position fixes and notify the device on rounded changes.

    Usage::

        watcher = LocationWatcher(provider, transport)
        watcher.request_fix()  # returns immediately
    """

    def __init__(
        self,
        provider: LocationProvider,
        transport: DeviceTransport,
        *,
        options: LocationOptions | None = None,
    ) -> None:
        self._provider = provider
        self._transport = transport
        self._options = options or LocationOptions()
        self._rounded_latitude: int | None = None
        self._rounded_longitude: int | None = None
        self._last_transaction_id: Any = None
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def options(self) -> LocationOptions:
        return self._options

    @property
    def last_rounded(self) -> tuple[int | None, int | None]:
        """Last rounded ``(latitude, longitude)``; ``None`` before the first fix."""
        return self._rounded_latitude, self._rounded_longitude

    @property
    def last_transaction_id(self) -> Any:
        """Transaction id of the last location-update message, for diagnostics."""
        return self._last_transaction_id

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request_fix(self) -> asyncio.Task[None]:
        """Schedule a position request and return without waiting for it.

        Earlier requests are left running; each one evaluates change
        detection when it completes.
        """
        task = asyncio.get_running_loop().create_task(self._fix())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _fix(self) -> None:
        try:
            position = await asyncio.wait_for(
                self._provider.current_position(self._options),
                timeout=self._options.timeout,
            )
        except TimeoutError:
            self._on_error(LocationUnavailableError(f"No position fix within {self._options.timeout}s"))
            return
        except LocationUnavailableError as exc:
            self._on_error(exc)
            return
        except Exception as exc:
            _logger.debug("Location provider failed unexpectedly", exc_info=True)
            self._on_error(LocationUnavailableError(f"Location provider failed: {exc!r}"))
            return
        self._on_success(position)

    def _on_success(self, position: Position) -> None:
        latitude, longitude = position.rounded()
        changed = False
        if self._rounded_longitude != longitude:
            self._rounded_longitude = longitude
            changed = True
        if self._rounded_latitude != latitude:
            self._rounded_latitude = latitude
            changed = True

        if not changed:
            _logger.debug("Position unchanged at rounded lat=%s lon=%s", latitude, longitude)
            return

        message = position.to_message()
        try:
            self._last_transaction_id = self._transport.send_message(message)
        except LunaTransportError:
            _logger.warning("Could not send location update %s", message, exc_info=True)
            return
        _logger.debug("Sent location update %s transaction=%s", message, self._last_transaction_id)

    def _on_error(self, exc: LocationUnavailableError) -> None:
        _logger.warning("Error getting location: %s", exc)

    async def wait_pending(self) -> None:
        """Wait until every outstanding request has completed."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """Cancel outstanding requests."""
        for task in list(self._pending):
            task.cancel()
        await self.wait_pending()
