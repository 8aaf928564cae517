"""Synchronous string-keyed storage backends."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Structural key-value interface used by :class:`PersistedConfigStore`.

    Having a protocol here makes it easy to pass test doubles while keeping
    the shipped backends concrete.
    """

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store; contents live as long as the instance."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)


class JsonFileStore:
    """Store persisted as a single JSON object file.

    The file is rewritten atomically on every ``set``. A missing or
    unreadable file is treated as an empty store.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._data = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError:
            _logger.warning("Could not read store file %s, starting empty", self._path, exc_info=True)
            return {}
        except UnicodeDecodeError:
            _logger.warning("Store file %s is not valid UTF-8, starting empty", self._path)
            return {}

        try:
            decoded = json.loads(text)
        except ValueError:
            _logger.warning("Store file %s is not valid JSON, starting empty", self._path)
            return {}
        if not isinstance(decoded, dict):
            _logger.warning("Store file %s does not hold a JSON object, starting empty", self._path)
            return {}
        return {str(k): str(v) for k, v in decoded.items() if v is not None}

    def _write(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        updated = dict(self._data)
        updated[key] = value
        self._write(updated)
        self._data = updated
