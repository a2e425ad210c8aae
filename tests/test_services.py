from __future__ import annotations

from lampctl.config import Settings
from lampctl.core import DeviceRegistry, DiscoveryClient, MockLamp, StatusQuery
from lampctl.services import LampSession, populate_registry


class SilentLamp(MockLamp):
    """Answers scans but never replies to devStatus."""

    def handle_datagram(self, payload, addr):
        reply = super().handle_datagram(payload, addr)
        if reply is not None and b"devStatus" in reply[0]:
            return None
        return reply


def test_scan_then_status_populates_registry(network, endpoints):
    registry = DeviceRegistry()

    devices = populate_registry(
        DiscoveryClient(network), StatusQuery(network), registry, endpoints
    )

    assert [d.ip for d in devices] == ["192.168.1.50"]
    device = registry.get("192.168.1.50")
    assert device.name == "LampA"
    assert device.sku == "H6159"
    assert device.ble_version_soft == "1.02"
    assert device.brightness == 80
    assert [sent[0] for sent in network.sent] == [
        b'{"msg":{"cmd":"scan","data":{"account_topic":"reserve"}}}',
        b'{"msg":{"cmd":"devStatus","data":{}}}',
    ]


def test_device_without_status_is_not_registered(make_network, endpoints):
    network = make_network(
        MockLamp(ip="192.168.1.50", name="Talkative"),
        SilentLamp(ip="192.168.1.51", name="Silent"),
    )
    registry = DeviceRegistry()

    query = StatusQuery(network, timeout=0.01)

    devices = populate_registry(DiscoveryClient(network), query, registry, endpoints)

    assert [d.name for d in devices] == ["Talkative"]
    assert "192.168.1.51" not in registry


def test_repeated_population_never_duplicates(network, endpoints):
    registry = DeviceRegistry()
    discovery = DiscoveryClient(network)
    query = StatusQuery(network)

    populate_registry(discovery, query, registry, endpoints)
    populate_registry(discovery, query, registry, endpoints)

    assert len(registry) == 1


def test_session_refresh_device_replaces_entry(network, lamp):
    session = LampSession(Settings(), transport=network)
    session.refresh()
    lamp.brightness = 10

    device = session.refresh_device(lamp.ip)

    assert device.brightness == 10
    assert session.registry.get(lamp.ip).name == "LampA"


def test_session_probe_unknown_lamp_uses_ip_as_name(network, lamp):
    session = LampSession(Settings(), transport=network)

    device = session.probe(lamp.ip)

    assert device.name == lamp.ip
    assert device.brightness == 80
    assert lamp.ip in session.registry


def test_session_commands_share_registry(network, lamp):
    session = LampSession(Settings(), transport=network)
    session.refresh()

    session.commands.toggle_power(session.registry.get(lamp.ip))

    assert session.registry.get(lamp.ip).is_on
    assert lamp.on_off == 1
