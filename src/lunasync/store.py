"""Typed persistence of the configuration record.

The store only ever sees strings. Integer fields are parsed on the way in
and again on the way out; whatever fails to parse is written as ``NaN``
and turned back into ``0`` by the defaulting pass in :meth:`load`.
"""

from __future__ import annotations

import logging

from lunasync._constants import CONFIG_KEYS, CONFIGURE_URL, INT_KEYS, NAME_KEYS
from lunasync.ingestion.normalize import safe_str, to_stored_int
from lunasync.models.record import ConfigSubmission, ConfigurationRecord
from lunasync.storage import KeyValueStore

_logger = logging.getLogger(__name__)


class PersistedConfigStore:
    """Read and write :class:`ConfigurationRecord` over a key-value store."""

    def __init__(self, backend: KeyValueStore, *, configure_url: str = CONFIGURE_URL) -> None:
        self._backend = backend
        self._configure_url = configure_url

    @property
    def backend(self) -> KeyValueStore:
        return self._backend

    def save(self, config: ConfigSubmission | ConfigurationRecord) -> None:
        """Write the ten configuration fields under their wire keys.

        Every field is serialized before the first write.
        """
        values = config.wire_values()
        _logger.debug("Saving configuration: %s", values)
        serialized: dict[str, str] = {}
        for key in CONFIG_KEYS:
            value = values[key]
            if key in INT_KEYS:
                serialized[key] = to_stored_int(value)
            elif key in NAME_KEYS:
                serialized[key] = safe_str(value) or ""
        for key, text in serialized.items():
            self._backend.set(key, text)

    def load(self) -> ConfigurationRecord:
        """Read the configuration back, defaulting invalid integers to 0.

        ``configure_url`` is never read from the store; it is always reset
        to the configured form URL.
        """
        stored = {key: self._backend.get(key) for key in CONFIG_KEYS}
        record = ConfigurationRecord.model_validate(
            {
                **stored,
                "configureUrl": self._configure_url,
            }
        )
        _logger.debug("Loaded configuration: stored=%s record=%s", stored, record.wire_values())
        return record
