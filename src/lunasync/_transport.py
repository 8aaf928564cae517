"""Device transport interface and the paho-mqtt implementation."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol, cast

import paho.mqtt.client as mqtt

from lunasync.config import LunaConfig
from lunasync.exceptions import LunaTransportError

_logger = logging.getLogger(__name__)


class DeviceTransport(Protocol):
    """Structural transport interface used by the controller and watcher.

    ``send_message`` is best-effort and returns an opaque transaction id.
    """

    def send_message(self, payload: Mapping[str, Any]) -> Any:
        ...

    def open_url(self, url: str) -> None:
        ...


def _default_client_factory(config: LunaConfig) -> mqtt.Client:
    return mqtt.Client(
        callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
        protocol=mqtt.MQTTv311,
    )


class MqttDeviceTransport:
    """Publish device messages as JSON over MQTT.

    App messages go to ``<topic>/appmessage`` and form URLs to
    ``<topic>/openurl``. The paho message id is the transaction id.
    """

    def __init__(
        self,
        config: LunaConfig,
        *,
        client_factory: Callable[[LunaConfig], mqtt.Client] | None = None,
        qos: int = 1,
        logger: logging.Logger | None = None,
    ) -> None:
        if not config.mqtt_host:
            raise LunaTransportError("MQTT transport needs config.mqtt_host")
        self._config = config
        self._client_factory = client_factory or _default_client_factory
        self._qos = qos
        self._logger = logger or _logger
        self._client: mqtt.Client | None = None
        self._running = False
        prefix = config.mqtt_topic.strip("/")
        self._message_topic = f"{prefix}/appmessage"
        self._url_topic = f"{prefix}/openurl"

    @property
    def is_running(self) -> bool:
        """Whether the network loop is running."""
        return self._running

    @property
    def message_topic(self) -> str:
        return self._message_topic

    @property
    def url_topic(self) -> str:
        return self._url_topic

    def start(self) -> None:
        """Connect to the broker and start the network loop."""
        self.stop()
        self._logger.debug(
            "MQTT transport start requested host=%s port=%s topic=%s",
            self._config.mqtt_host,
            self._config.mqtt_port,
            self._message_topic,
        )
        client = self._client_factory(self._config)
        client.enable_logger(self._logger)
        if self._config.mqtt_tls:
            client.tls_set()

        def on_connect(
            _c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._logger.debug("MQTT connected successfully reason=%s", reason_code)

        def on_disconnect(
            _c: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.debug("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_disconnect = on_disconnect

        try:
            client.connect(
                cast(str, self._config.mqtt_host),
                self._config.mqtt_port,
                keepalive=self._config.mqtt_keepalive,
            )
        except OSError as exc:
            raise LunaTransportError(
                f"Could not connect to {self._config.mqtt_host}:{self._config.mqtt_port}: {exc}",
            ) from exc
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def stop(self) -> None:
        """Disconnect and stop the network loop if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")

    def _publish(self, topic: str, body: str) -> int:
        client = self._client
        if client is None or not self._running:
            raise LunaTransportError("MQTT transport is not running", topic=topic)

        info = client.publish(topic, body, qos=self._qos)
        if info.rc == mqtt.MQTT_ERR_NO_CONN:
            # QoS>0 messages stay queued until the client reconnects.
            self._logger.debug("Broker not connected, queued mid=%s topic=%s", info.mid, topic)
        elif info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise LunaTransportError(
                f"Publish to {topic} failed: {mqtt.error_string(info.rc)}",
                topic=topic,
            )
        self._logger.debug("Published mid=%s topic=%s body=%s", info.mid, topic, body)
        return info.mid

    def send_message(self, payload: Mapping[str, Any]) -> int:
        """Publish *payload* as a JSON app message; returns the message id."""
        return self._publish(self._message_topic, json.dumps(dict(payload), separators=(",", ":")))

    def open_url(self, url: str) -> None:
        """Ask the host to open *url* in its web view."""
        self._publish(self._url_topic, url)
