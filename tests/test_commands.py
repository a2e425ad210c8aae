from __future__ import annotations

import json

import pytest

from lampctl.errors import (
    CommandError,
    DeviceNotFoundError,
    PowerStateError,
    SocketError,
)
from lampctl.models import Color


def test_toggle_sends_turn_and_updates_registry(commands, network, registry, device):
    updated = commands.toggle_power(device)

    payload, endpoint = network.sent[-1]
    assert payload == b'{"msg":{"cmd":"turn","data":{"value":1}}}'
    assert endpoint.address == ("192.168.1.50", 4003)
    assert updated.on_off == 1
    assert registry.get(device.ip).on_off == 1


def test_toggle_twice_restores_power_and_nothing_else(commands, registry, device):
    commands.toggle_power(device)
    commands.toggle_power(device)

    assert registry.get(device.ip) == device


def test_toggle_reads_recorded_state_not_caller_copy(commands, registry, device):
    commands.toggle_power(device)
    # the caller's copy is stale and still says off
    commands.toggle_power(device)

    assert registry.get(device.ip).on_off == 0


def test_failed_send_leaves_registry_untouched(commands, network, registry, device):
    network.send_error = SocketError("Network is unreachable")

    with pytest.raises(CommandError) as excinfo:
        commands.toggle_power(device)

    assert isinstance(excinfo.value.__cause__, SocketError)
    assert registry.get(device.ip).on_off == 0


def test_toggle_rejects_unexpected_power_value(commands, network, registry, device):
    registry.upsert(device.model_copy(update={"on_off": 2}))

    with pytest.raises(PowerStateError):
        commands.toggle_power(device)

    assert network.sent == []
    assert registry.get(device.ip).on_off == 2


def test_set_power_explicit(commands, lamp, registry, device):
    commands.set_power(device, True)
    commands.set_power(device, True)

    assert lamp.on_off == 1
    assert registry.get(device.ip).on_off == 1


def test_set_brightness(commands, network, lamp, registry, device):
    commands.set_brightness(device, 25)

    assert json.loads(network.sent[-1][0])["msg"]["data"] == {"value": 25}
    assert lamp.brightness == 25
    assert registry.get(device.ip).brightness == 25


def test_invalid_brightness_not_sent(commands, network, registry, device):
    with pytest.raises(CommandError):
        commands.set_brightness(device, 0)

    assert network.sent == []
    assert registry.get(device.ip).brightness == 80


def test_set_color(commands, lamp, registry, device):
    commands.set_color(device, (10, 20, 30), kelvin=4000)

    stored = registry.get(device.ip)
    assert stored.color == Color(r=10, g=20, b=30)
    assert stored.color_temperature == 4000
    assert stored.on_off == device.on_off
    assert lamp.color == Color(r=10, g=20, b=30)
    assert lamp.color_temperature == 4000


@pytest.mark.parametrize(("rgb", "kelvin"), [((256, 0, 0), 0), ((0, 0, 0), -1)])
def test_invalid_color_not_sent(commands, network, registry, device, rgb, kelvin):
    with pytest.raises(CommandError):
        commands.set_color(device, rgb, kelvin)

    assert network.sent == []
    assert registry.get(device.ip) == device


def test_unknown_device_not_sent(commands, network, device):
    stranger = device.model_copy(update={"ip": "192.168.1.200"})

    with pytest.raises(CommandError) as excinfo:
        commands.set_power(stranger, True)

    assert isinstance(excinfo.value.__cause__, DeviceNotFoundError)
    assert network.sent == []


def test_toggle_unknown_device_raises_command_error(commands, network, device):
    stranger = device.model_copy(update={"ip": "192.168.1.200"})

    with pytest.raises(CommandError) as excinfo:
        commands.toggle_power(stranger)

    assert isinstance(excinfo.value.__cause__, DeviceNotFoundError)
    assert network.sent == []
