"""Custom exception hierarchy for lunasync."""

from __future__ import annotations


class LunaError(Exception):
    """Base exception for all lunasync errors."""


class LunaConfigError(LunaError):
    """Invalid or missing configuration."""


class WebviewResultError(LunaError):
    """The configuration form returned something that is not a JSON object.

    Raised before anything is written to the store, so the previously
    persisted configuration stays intact.
    """

    def __init__(self, message: str, *, response: str = "") -> None:
        self.response = response
        super().__init__(message)


class LocationUnavailableError(LunaError):
    """A position fix could not be obtained."""


class LunaTransportError(LunaError):
    """A message could not be handed to the device transport."""

    def __init__(self, message: str, *, topic: str = "") -> None:
        self.topic = topic
        super().__init__(message)
