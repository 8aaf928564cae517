"""Bridge configuration for lunasync."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from lunasync._constants import CONFIGURE_URL, DEFAULT_LOCATION_MAXIMUM_AGE, DEFAULT_LOCATION_TIMEOUT
from lunasync.exceptions import LunaConfigError
from lunasync.models.location import LocationOptions


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise LunaConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class LunaConfig:
    """Bridge configuration.

    Parameters
    ----------
    configure_url : str
        URL of the remote configuration form. Every load resets the
        in-memory record to this value.
    location_timeout : float
        Seconds to wait for a single position fix.
    location_maximum_age : float
        Maximum age in seconds of a cached fix the location service may
        return. ``0`` always asks for a fresh fix.
    enable_high_accuracy : bool
        Ask the location service for a high-accuracy fix instead of the
        standard/low-power mode.
    propagate_on_ready : bool
        Load the persisted configuration and send it to the device on the
        ``ready`` event. Off by default: configuration is only sent after
        the form has been submitted.
    store_path : str or None
        JSON file backing the key-value store. ``None`` keeps the store in
        memory.
    location_url : str or None
        HTTP endpoint returning the current position as JSON.
    mqtt_host : str or None
        Broker used to reach the device.
    mqtt_port : int
        Broker port.
    mqtt_topic : str
        Topic prefix for outbound messages.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    mqtt_tls : bool
        Connect to the broker over TLS.
    """

    configure_url: str = CONFIGURE_URL
    location_timeout: float = DEFAULT_LOCATION_TIMEOUT
    location_maximum_age: float = DEFAULT_LOCATION_MAXIMUM_AGE
    enable_high_accuracy: bool = False
    propagate_on_ready: bool = False
    store_path: str | None = None
    location_url: str | None = None
    mqtt_host: str | None = None
    mqtt_port: int = 1883
    mqtt_topic: str = "luna"
    mqtt_keepalive: int = 60
    mqtt_tls: bool = False

    def __post_init__(self) -> None:
        if self.location_timeout <= 0:
            raise LunaConfigError("location_timeout must be positive")
        if self.location_maximum_age < 0:
            raise LunaConfigError("location_maximum_age must not be negative")
        if not self.mqtt_topic.strip("/"):
            raise LunaConfigError("mqtt_topic must be non-empty")

    def location_options(self) -> LocationOptions:
        """Options passed with every position request."""
        return LocationOptions(
            timeout=self.location_timeout,
            maximum_age=self.location_maximum_age,
            enable_high_accuracy=self.enable_high_accuracy,
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> LunaConfig:
        """Create configuration from ``LUNA_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "LUNA_CONFIGURE_URL": "configure_url",
            "LUNA_STORE_PATH": "store_path",
            "LUNA_LOCATION_URL": "location_url",
            "LUNA_MQTT_HOST": "mqtt_host",
            "LUNA_MQTT_TOPIC": "mqtt_topic",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMBER_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
            "LUNA_LOCATION_TIMEOUT": ("location_timeout", float),
            "LUNA_LOCATION_MAXIMUM_AGE": ("location_maximum_age", float),
            "LUNA_MQTT_PORT": ("mqtt_port", int),
            "LUNA_MQTT_KEEPALIVE": ("mqtt_keepalive", int),
        }
        for env_key, (field_name, cast) in _ENV_NUMBER_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, cast)

        _ENV_BOOL_MAP = {
            "LUNA_ENABLE_HIGH_ACCURACY": "enable_high_accuracy",
            "LUNA_PROPAGATE_ON_READY": "propagate_on_ready",
            "LUNA_MQTT_TLS": "mqtt_tls",
        }
        for env_key, field_name in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
