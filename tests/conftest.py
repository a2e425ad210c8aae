from __future__ import annotations

import threading
from collections import deque

import pytest

from lampctl.config import NetworkConfig, get_settings
from lampctl.core import (
    CommandSender,
    DeviceRegistry,
    Endpoints,
    MockLamp,
    NetworkEndpoint,
    resolve_endpoints,
)
from lampctl.errors import ReceiveTimeoutError
from lampctl.models import Color, Device


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.delenv("LAMPCTL_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeNetwork:
    """Stand-in for LanSocket that routes datagrams to in-memory lamps."""

    def __init__(self, endpoints: Endpoints, lamps: list[MockLamp] | None = None):
        self.endpoints = endpoints
        self.lock = threading.Lock()
        self.lamps = {lamp.ip: lamp for lamp in lamps or []}
        self.sent: list[tuple[bytes, NetworkEndpoint]] = []
        self.inbox: deque[tuple[bytes, tuple[str, int]]] = deque()
        self.send_error: Exception | None = None
        self.receive_error: Exception | None = None

    def open(self) -> FakeNetwork:
        return self

    def close(self) -> None:
        pass

    def inject(self, payload: bytes, source: tuple[str, int]) -> None:
        self.inbox.append((payload, source))

    def send(self, payload: bytes, endpoint: NetworkEndpoint) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((payload, endpoint))
        if endpoint == self.endpoints.scan_target:
            targets = list(self.lamps.values())
        else:
            targets = [self.lamps[endpoint.host]] if endpoint.host in self.lamps else []
        for lamp in targets:
            reply = lamp.handle_datagram(payload, self.endpoints.listener.address)
            if reply is not None:
                self.inbox.append((reply[0], (lamp.ip, lamp.control_port)))

    def receive(self, timeout: float) -> tuple[bytes, tuple[str, int]]:
        if self.receive_error is not None:
            raise self.receive_error
        if timeout <= 0 or not self.inbox:
            raise ReceiveTimeoutError("No datagram")
        return self.inbox.popleft()


@pytest.fixture
def endpoints() -> Endpoints:
    return resolve_endpoints(NetworkConfig())


@pytest.fixture
def lamp() -> MockLamp:
    return MockLamp(
        ip="192.168.1.50",
        name="LampA",
        sku="H6159",
        on_off=0,
        brightness=80,
        color=Color(r=255, g=128, b=0),
        color_temperature=0,
    )


@pytest.fixture
def network(endpoints: Endpoints, lamp: MockLamp) -> FakeNetwork:
    return FakeNetwork(endpoints, [lamp])


@pytest.fixture
def device() -> Device:
    return Device(
        ip="192.168.1.50",
        name="LampA",
        sku="H6159",
        ble_version_hard="1.00",
        ble_version_soft="1.02",
        wifi_version_hard="1.00",
        wifi_version_soft="1.03",
        on_off=0,
        brightness=80,
        color=Color(r=255, g=128, b=0),
        color_temperature=0,
    )


@pytest.fixture
def registry(device: Device) -> DeviceRegistry:
    return DeviceRegistry([device])


@pytest.fixture
def commands(
    network: FakeNetwork, endpoints: Endpoints, registry: DeviceRegistry
) -> CommandSender:
    return CommandSender(network, endpoints, registry)  # type: ignore[arg-type]


@pytest.fixture
def make_network(endpoints: Endpoints):
    def _make(*lamps: MockLamp) -> FakeNetwork:
        return FakeNetwork(endpoints, list(lamps))

    return _make
