from __future__ import annotations

from lampctl.cli.view import DeviceListView
from lampctl.core import DeviceRegistry
from lampctl.errors import SocketError


def _text(view: DeviceListView) -> str:
    return "".join(text for _style, text in view.render())


def test_cursor_stays_within_list(registry, commands, device):
    registry.upsert(device.model_copy(update={"ip": "192.168.1.51", "name": "LampB"}))
    view = DeviceListView(registry, commands)

    view.move_up()
    assert view.cursor == 0
    view.move_down()
    view.move_down()
    assert view.cursor == 1
    assert view.selected().name == "LampB"


def test_toggle_selected_updates_registry_and_message(registry, commands, device):
    view = DeviceListView(registry, commands)

    view.toggle_selected()

    assert registry.get(device.ip).is_on
    assert view.message == "LampA turned on"
    assert "> [x] LampA" in _text(view)


def test_failed_toggle_reported_without_crash(registry, commands, network, device):
    network.send_error = SocketError("Network is unreachable")
    view = DeviceListView(registry, commands)

    view.toggle_selected()

    assert view.message.startswith("Error:")
    assert "Network is unreachable" in view.message
    assert not registry.get(device.ip).is_on
    assert "> [ ] LampA" in _text(view)


def test_empty_registry(commands):
    view = DeviceListView(DeviceRegistry(), commands)
    view.toggle_selected()
    view.move_down()

    assert view.selected() is None
    assert "no lamps found" in _text(view)
