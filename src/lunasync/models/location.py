"""Position fix and location request models."""

from __future__ import annotations

import math
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from lunasync._constants import (
    DEFAULT_LOCATION_MAXIMUM_AGE,
    DEFAULT_LOCATION_TIMEOUT,
    KEY_LIVE_LATITUDE,
    KEY_LIVE_LONGITUDE,
)
from lunasync.ingestion.normalize import safe_float


def round_coordinate(value: float) -> int:
    """Round to the nearest whole degree, halves toward positive infinity."""
    return math.floor(value + 0.5)


class LocationOptions(BaseModel):
    """Options for a single position request.

    Parameters
    ----------
    timeout : float
        Seconds to wait for the fix.
    maximum_age : float
        Maximum age in seconds of a cached fix. ``0`` forces a fresh fix.
    enable_high_accuracy : bool
        Request a high-accuracy fix instead of the standard mode.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timeout: float = Field(default=DEFAULT_LOCATION_TIMEOUT, gt=0)
    maximum_age: float = Field(default=DEFAULT_LOCATION_MAXIMUM_AGE, ge=0)
    enable_high_accuracy: bool = False

    @property
    def timeout_ms(self) -> int:
        return int(self.timeout * 1000)

    @property
    def maximum_age_ms(self) -> int:
        return int(self.maximum_age * 1000)


class Position(BaseModel):
    """A single position fix.

    Latitude and longitude are required; a payload without both fails
    validation.

    Parameters
    ----------
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    accuracy : float or None
        Accuracy radius in metres, when reported.
    timestamp : float or None
        Fix timestamp, when reported.
    raw : dict
        Original payload.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lng", "lon"))
    accuracy: float | None = Field(default=None, validation_alias=AliasChoices("accuracy", "acc"))
    timestamp: float | None = Field(default=None, validation_alias=AliasChoices("timestamp", "time"))
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _merge_nested_coords(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        for key in ("coords", "data", "location"):
            nested = values.get(key)
            if isinstance(nested, dict):
                merged.update(nested)
        merged.setdefault("raw", values)
        return merged

    @field_validator("latitude", "longitude", "accuracy", "timestamp", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    def rounded(self) -> tuple[int, int]:
        """Return ``(latitude, longitude)`` rounded to whole degrees."""
        return round_coordinate(self.latitude), round_coordinate(self.longitude)

    def to_message(self) -> dict[str, float]:
        """Build the location-update message carrying the raw coordinates."""
        return {
            KEY_LIVE_LONGITUDE: self.longitude,
            KEY_LIVE_LATITUDE: self.latitude,
        }
