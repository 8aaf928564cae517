from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import pytest

from lunasync._constants import CONFIGURE_URL
from lunasync.config import LunaConfig
from lunasync.controller import ConfigSyncController
from lunasync.exceptions import LunaTransportError, WebviewResultError
from lunasync.location import LocationWatcher
from lunasync.models import LocationOptions, Position
from lunasync.store import PersistedConfigStore


@dataclass
class FakeTransport:
    messages: list[dict[str, Any]] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)
    fail_urls: bool = False

    def send_message(self, payload: dict[str, Any]) -> int:
        self.messages.append(dict(payload))
        return len(self.messages)

    def open_url(self, url: str) -> None:
        if self.fail_urls:
            raise LunaTransportError("host unreachable")
        self.urls.append(url)


@dataclass
class RecordingStore:
    data: dict[str, str] = field(default_factory=dict)
    writes: list[tuple[str, str]] = field(default_factory=list)

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        self.data[key] = value


@dataclass
class FakeProvider:
    position: Position = field(default_factory=lambda: Position(latitude=40.7128, longitude=-74.0060))
    calls: list[LocationOptions] = field(default_factory=list)

    async def current_position(self, options: LocationOptions) -> Position:
        self.calls.append(options)
        return self.position


@dataclass
class Harness:
    controller: ConfigSyncController
    transport: FakeTransport
    backend: RecordingStore
    provider: FakeProvider


def _harness(config: LunaConfig | None = None, data: dict[str, str] | None = None) -> Harness:
    config = config or LunaConfig()
    transport = FakeTransport()
    backend = RecordingStore(data=dict(data or {}))
    provider = FakeProvider()
    watcher = LocationWatcher(provider, transport, options=config.location_options())
    controller = ConfigSyncController(
        PersistedConfigStore(backend, configure_url=config.configure_url),
        transport,
        watcher,
        config=config,
    )
    return Harness(controller, transport, backend, provider)


FORM_RESULT = json.dumps(
    {
        "TZ1Name": "EST",
        "TZ1": "5",
        "TZ2Name": "JST",
        "TZ2": "9",
        "TZSS": "0",
        "LATITUDE": "41",
        "LONGITUDE": "-74",
        "invert": "1",
        "dmy": "0",
        "lang": "2",
    }
)


# ------------------------------------------------------------------
# Lifecycle
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_ready_requests_location_only() -> None:
    h = _harness(data={"TZ1": "3"})

    h.controller.on_ready()
    await h.controller.watcher.wait_pending()

    assert len(h.provider.calls) == 1
    assert h.transport.messages == [{"KEY_LONGITUDE": -74.0060, "KEY_LATITUDE": 40.7128}]
    assert h.controller.config.tz1 == 0
    assert h.backend.writes == []


@pytest.mark.asyncio
async def test_ready_can_propagate_persisted_configuration() -> None:
    h = _harness(LunaConfig(propagate_on_ready=True), data={"TZ1": "3", "TZ1Name": "CET"})

    h.controller.on_ready()
    await h.controller.watcher.wait_pending()

    assert h.controller.config.tz1 == 3
    config_messages = [m for m in h.transport.messages if "TZ1" in m]
    assert config_messages[0]["TZ1"] == 3
    assert config_messages[0]["TZ1Name"] == "CET"


@pytest.mark.asyncio
async def test_refresh_requests_a_new_fix_without_resending_configuration() -> None:
    h = _harness()

    h.controller.on_refresh_requested()
    h.controller.on_refresh_requested()
    await h.controller.watcher.wait_pending()

    assert len(h.provider.calls) == 2
    # Same position twice: only the first fix reaches the device.
    assert len(h.transport.messages) == 1
    assert all("TZ1" not in m for m in h.transport.messages)


def test_configuration_requested_opens_form_before_any_load() -> None:
    h = _harness()

    h.controller.on_configuration_requested()

    assert h.transport.urls == [CONFIGURE_URL]


def test_configuration_requested_uses_configured_url() -> None:
    h = _harness(LunaConfig(configure_url="http://localhost/index2.html"))

    h.controller.on_configuration_requested()

    assert h.transport.urls == ["http://localhost/index2.html"]


# ------------------------------------------------------------------
# Webview result
# ------------------------------------------------------------------


@pytest.mark.parametrize("response", [None, ""])
def test_empty_webview_result_is_a_no_op(response: str | None) -> None:
    h = _harness()
    before = h.controller.config

    h.controller.on_webview_result(response)

    assert h.backend.writes == []
    assert h.transport.messages == []
    assert h.controller.config is before


def test_webview_result_saves_reloads_and_propagates() -> None:
    h = _harness()

    h.controller.on_webview_result(FORM_RESULT)

    assert h.backend.data["TZ1"] == "5"
    assert h.controller.config.tz1 == 5
    assert h.controller.config.configure_url == CONFIGURE_URL
    assert h.transport.messages == [
        {
            "TZ1Name": "EST",
            "TZ1": 5,
            "TZ2Name": "JST",
            "TZ2": 9,
            "TZSS": 0,
            "LATITUDE": 41,
            "LONGITUDE": -74,
            "invert": 1,
            "dmy": 0,
            "lang": 2,
        }
    ]


def test_webview_result_with_invalid_numbers_propagates_zeros() -> None:
    h = _harness()

    h.controller.on_webview_result('{"TZ1Name": "EST", "TZ1": "five", "lang": "x"}')

    message = h.transport.messages[0]
    assert message["TZ1"] == 0
    assert message["lang"] == 0
    assert message["TZ1Name"] == "EST"
    assert message["TZ2Name"] == ""


def test_malformed_webview_result_writes_nothing() -> None:
    h = _harness(data={"TZ1": "3"})
    h.controller.on_webview_result('{"TZ1": "4"}')
    before = h.controller.config
    writes = list(h.backend.writes)

    with pytest.raises(WebviewResultError):
        h.controller.on_webview_result("{truncated")

    assert h.backend.writes == writes
    assert h.controller.config is before
    assert len(h.transport.messages) == 1


def test_propagate_returns_transaction_id() -> None:
    h = _harness()

    assert h.controller.propagate() == 1
    assert h.transport.messages[0]["TZ1"] == 0


# ------------------------------------------------------------------
# Dispatch
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_handle_event_routes_host_events() -> None:
    h = _harness()

    h.controller.handle_event("ready")
    h.controller.handle_event("showConfiguration")
    h.controller.handle_event("webviewclosed", {"response": FORM_RESULT})
    h.controller.handle_event("appmessage", {"anything": 1})
    await h.controller.watcher.wait_pending()

    assert h.transport.urls == [CONFIGURE_URL]
    assert len(h.provider.calls) == 2
    assert h.controller.config.tz1 == 5


def test_handle_event_drops_malformed_webview_result(caplog) -> None:
    h = _harness()

    with caplog.at_level(logging.WARNING, logger="lunasync.controller"):
        h.controller.handle_event("webviewclosed", {"response": "not json"})

    assert h.backend.writes == []
    assert h.transport.messages == []
    assert "Dropped webviewclosed event" in caplog.text


def test_handle_event_with_oversized_integer_saves_every_field() -> None:
    h = _harness()

    h.controller.handle_event("webviewclosed", {"response": json.dumps({"TZ1Name": "EST", "TZ1": "1" * 5000})})

    assert h.backend.data["TZ1Name"] == "EST"
    assert h.backend.data["TZ1"] == "NaN"
    assert len(h.backend.writes) == 10
    assert h.transport.messages[0]["TZ1"] == 0
    assert h.transport.messages[0]["TZ1Name"] == "EST"


def test_handle_event_without_response_is_a_no_op() -> None:
    h = _harness()

    h.controller.handle_event("webviewclosed")
    h.controller.handle_event("webviewclosed", {"response": None})

    assert h.backend.writes == []
    assert h.transport.messages == []


def test_handle_event_drops_transport_failures() -> None:
    h = _harness()
    h.transport.fail_urls = True

    h.controller.handle_event("showConfiguration")

    assert h.transport.urls == []


def test_handle_event_ignores_unknown_events() -> None:
    h = _harness()

    h.controller.handle_event("timelineToken")

    assert h.transport.messages == []
    assert h.transport.urls == []
