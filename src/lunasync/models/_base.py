"""Base model for configuration payloads.

Every configuration model inherits from :class:`LunaBaseModel` which
provides:

* wire keys (``TZ1Name``, ``TZ1``, ...) as field aliases, with
  ``populate_by_name`` so snake_case attribute names work too.
* A ``model_validator(mode="before")`` that stashes the original payload
  in ``raw``.
* :meth:`LunaBaseModel.wire_values` returning the ten configuration
  fields keyed by wire key, in message order.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lunasync._constants import CONFIG_KEYS


class LunaBaseModel(BaseModel):
    """Base for configuration records and form submissions."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original payload dict."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        # Keep the caller's raw= when constructing with keyword arguments.
        if "raw" in values:
            return values
        stashed = dict(values)
        stashed["raw"] = dict(values)
        return stashed

    def wire_values(self) -> dict[str, Any]:
        """Return the configuration fields keyed by wire key, in message order."""
        by_alias = {field.alias: name for name, field in type(self).model_fields.items() if field.alias}
        return {key: getattr(self, by_alias[key]) for key in CONFIG_KEYS}
