from __future__ import annotations

import pytest

from lunasync._constants import CONFIGURE_URL
from lunasync.config import LunaConfig
from lunasync.exceptions import LunaConfigError

_ENV_KEYS = (
    "LUNA_CONFIGURE_URL",
    "LUNA_LOCATION_TIMEOUT",
    "LUNA_LOCATION_MAXIMUM_AGE",
    "LUNA_ENABLE_HIGH_ACCURACY",
    "LUNA_PROPAGATE_ON_READY",
    "LUNA_STORE_PATH",
    "LUNA_LOCATION_URL",
    "LUNA_MQTT_HOST",
    "LUNA_MQTT_PORT",
    "LUNA_MQTT_TOPIC",
    "LUNA_MQTT_KEEPALIVE",
    "LUNA_MQTT_TLS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = LunaConfig.from_env()

    assert config.configure_url == CONFIGURE_URL
    assert config.location_timeout == 60.0
    assert config.location_maximum_age == 0.0
    assert config.enable_high_accuracy is False
    assert config.propagate_on_ready is False
    assert config.store_path is None
    assert config.mqtt_host is None


def test_from_env(monkeypatch) -> None:
    monkeypatch.setenv("LUNA_CONFIGURE_URL", "http://localhost/index2.html")
    monkeypatch.setenv("LUNA_LOCATION_TIMEOUT", "15")
    monkeypatch.setenv("LUNA_ENABLE_HIGH_ACCURACY", "yes")
    monkeypatch.setenv("LUNA_PROPAGATE_ON_READY", "on")
    monkeypatch.setenv("LUNA_STORE_PATH", "/tmp/luna.json")
    monkeypatch.setenv("LUNA_MQTT_HOST", "broker.local")
    monkeypatch.setenv("LUNA_MQTT_PORT", "8883")
    monkeypatch.setenv("LUNA_MQTT_TLS", "true")

    config = LunaConfig.from_env()

    assert config.configure_url == "http://localhost/index2.html"
    assert config.location_timeout == 15.0
    assert config.enable_high_accuracy is True
    assert config.propagate_on_ready is True
    assert config.store_path == "/tmp/luna.json"
    assert config.mqtt_host == "broker.local"
    assert config.mqtt_port == 8883
    assert config.mqtt_tls is True


def test_overrides_win_over_env(monkeypatch) -> None:
    monkeypatch.setenv("LUNA_MQTT_PORT", "8883")
    monkeypatch.setenv("LUNA_PROPAGATE_ON_READY", "1")

    config = LunaConfig.from_env(mqtt_port=1884, propagate_on_ready=False)

    assert config.mqtt_port == 1884
    assert config.propagate_on_ready is False


def test_unrecognised_bool_keeps_default(monkeypatch) -> None:
    monkeypatch.setenv("LUNA_MQTT_TLS", "maybe")

    assert LunaConfig.from_env().mqtt_tls is False


def test_non_numeric_env_value_raises(monkeypatch) -> None:
    monkeypatch.setenv("LUNA_LOCATION_TIMEOUT", "soon")

    with pytest.raises(LunaConfigError):
        LunaConfig.from_env()


def test_invalid_values_rejected() -> None:
    with pytest.raises(LunaConfigError):
        LunaConfig(location_timeout=0)
    with pytest.raises(LunaConfigError):
        LunaConfig(location_maximum_age=-1)
    with pytest.raises(LunaConfigError):
        LunaConfig(mqtt_topic="/")


def test_location_options() -> None:
    options = LunaConfig(location_timeout=30, enable_high_accuracy=True).location_options()

    assert options.timeout == 30
    assert options.maximum_age == 0
    assert options.enable_high_accuracy is True
