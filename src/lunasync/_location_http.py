"""HTTP location provider.

Fetches the current position from a JSON endpoint. Accepted bodies look
like ``{"latitude": 40.71, "longitude": -74.0}``; ``lat``/``lon``/``lng``
aliases and a nested ``coords``/``data``/``location`` object also work.
"""

from __future__ import annotations

import json
import logging

import aiohttp
from pydantic import ValidationError

from lunasync.exceptions import LocationUnavailableError
from lunasync.models.location import LocationOptions, Position

_logger = logging.getLogger(__name__)


class HttpLocationProvider:
    """Location provider backed by an HTTP endpoint."""

    def __init__(self, url: str, http_session: aiohttp.ClientSession) -> None:
        self._url = url
        self._http = http_session

    async def current_position(self, options: LocationOptions) -> Position:
        headers = {"accept": "application/json"}
        if options.maximum_age <= 0:
            headers["cache-control"] = "no-cache"
        else:
            headers["cache-control"] = f"max-age={int(options.maximum_age)}"
        params = {"highAccuracy": "1"} if options.enable_high_accuracy else None
        timeout = aiohttp.ClientTimeout(total=options.timeout)

        _logger.debug("GET %s", self._url)

        try:
            async with self._http.get(self._url, headers=headers, params=params, timeout=timeout) as resp:
                data = await resp.read()
                if resp.status != 200:
                    preview = data[:200].decode("utf-8", errors="replace")
                    raise LocationUnavailableError(f"HTTP {resp.status} from {self._url}: {preview}")
        except LocationUnavailableError:
            raise
        except aiohttp.ClientError as exc:
            raise LocationUnavailableError(f"Request to {self._url} failed: {exc}") from exc

        text = data.decode("utf-8", errors="replace")
        try:
            body = json.loads(data)
        except ValueError as exc:
            raise LocationUnavailableError(f"Invalid JSON from {self._url}: {text[:200]}") from exc
        if not isinstance(body, dict):
            raise LocationUnavailableError(f"Position from {self._url} is not a JSON object")

        try:
            return Position.model_validate(body)
        except ValidationError as exc:
            raise LocationUnavailableError(f"Position from {self._url} has no usable coordinates") from exc
