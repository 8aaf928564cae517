"""Configuration record and form submission models."""

from __future__ import annotations

import json
from typing import Any

from pydantic import Field, field_validator

from lunasync._constants import (
    CONFIGURE_URL,
    INT_KEYS,
    KEY_CONFIG_LATITUDE,
    KEY_CONFIG_LONGITUDE,
    KEY_DMY,
    KEY_INVERT,
    KEY_LANG,
    KEY_TZ1,
    KEY_TZ1_NAME,
    KEY_TZ2,
    KEY_TZ2_NAME,
    KEY_TZSS,
)
from lunasync.exceptions import WebviewResultError
from lunasync.ingestion.normalize import coerce_int_or_default, safe_str
from lunasync.models._base import LunaBaseModel

OutboundMessage = dict[str, int | float | str | None]
"""Flat payload handed to the device transport."""


class ConfigurationRecord(LunaBaseModel):
    """The persisted watchface configuration.

    Numeric fields are always valid integers: anything that does not parse
    is replaced by ``0`` during validation (the defaulting pass). Name
    fields are passed through unchanged, ``None`` included.

    Parameters
    ----------
    tz1_name, tz2_name : str or None
        Labels of the two secondary time zones.
    tz1, tz2 : int
        UTC offsets of the two secondary time zones.
    tzss : int
        Seconds adjustment value.
    latitude, longitude : int
        Configured location, independent of the live position fix.
    invert : int
        ``1`` for an inverted (light) face.
    dmy : int
        ``1`` for day-month-year date order.
    lang : int
        Language index.
    configure_url : str
        URL of the configuration form. Never persisted.
    """

    tz1_name: str | None = Field(default=None, alias=KEY_TZ1_NAME)
    tz1: int = Field(default=0, alias=KEY_TZ1)
    tz2_name: str | None = Field(default=None, alias=KEY_TZ2_NAME)
    tz2: int = Field(default=0, alias=KEY_TZ2)
    tzss: int = Field(default=0, alias=KEY_TZSS)
    latitude: int = Field(default=0, alias=KEY_CONFIG_LATITUDE)
    longitude: int = Field(default=0, alias=KEY_CONFIG_LONGITUDE)
    invert: int = Field(default=0, alias=KEY_INVERT)
    dmy: int = Field(default=0, alias=KEY_DMY)
    lang: int = Field(default=0, alias=KEY_LANG)
    configure_url: str = Field(default=CONFIGURE_URL, alias="configureUrl")

    @field_validator("tz1", "tz2", "tzss", "latitude", "longitude", "invert", "dmy", "lang", mode="before")
    @classmethod
    def _default_invalid_ints(cls, value: Any) -> int:
        return coerce_int_or_default(value, 0)

    @field_validator("tz1_name", "tz2_name", mode="before")
    @classmethod
    def _coerce_names(cls, value: Any) -> str | None:
        return safe_str(value)

    def to_message(self) -> OutboundMessage:
        """Build the full-configuration message for the device."""
        message: OutboundMessage = {}
        for key, value in self.wire_values().items():
            message[key] = coerce_int_or_default(value, 0) if key in INT_KEYS else value
        return message


class ConfigSubmission(LunaBaseModel):
    """Loosely-typed result of the configuration form.

    Values are kept exactly as the form sent them; coercion happens when
    they are written to the store. Build instances with :meth:`parse`.
    """

    tz1_name: Any = Field(default=None, alias=KEY_TZ1_NAME)
    tz1: Any = Field(default=None, alias=KEY_TZ1)
    tz2_name: Any = Field(default=None, alias=KEY_TZ2_NAME)
    tz2: Any = Field(default=None, alias=KEY_TZ2)
    tzss: Any = Field(default=None, alias=KEY_TZSS)
    latitude: Any = Field(default=None, alias=KEY_CONFIG_LATITUDE)
    longitude: Any = Field(default=None, alias=KEY_CONFIG_LONGITUDE)
    invert: Any = Field(default=None, alias=KEY_INVERT)
    dmy: Any = Field(default=None, alias=KEY_DMY)
    lang: Any = Field(default=None, alias=KEY_LANG)

    @classmethod
    def parse(cls, response: str) -> ConfigSubmission:
        """Parse a form response or raise :class:`WebviewResultError`.

        Only a JSON object is accepted; nothing partial is ever returned.
        """
        try:
            decoded = json.loads(response)
        except (TypeError, ValueError) as exc:
            raise WebviewResultError(
                f"Configuration response is not valid JSON: {exc}",
                response=str(response),
            ) from exc
        if not isinstance(decoded, dict):
            raise WebviewResultError(
                f"Configuration response is not a JSON object: {type(decoded).__name__}",
                response=response,
            )
        decoded.pop("raw", None)
        return cls.model_validate(decoded)
