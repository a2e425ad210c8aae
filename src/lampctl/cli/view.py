"""Selectable lamp list shown by ``lampctl ui``.

The view reads the registry on every render and calls the command sender on
selection. It holds no protocol state of its own, so it can be driven
without a terminal.
"""

from __future__ import annotations

import logging

from lampctl.core import CommandSender, DeviceRegistry
from lampctl.errors import LampctlError
from lampctl.models import Device

logger = logging.getLogger(__name__)

StyleFragments = list[tuple[str, str]]

FOOTER = "j/k or arrows to move, enter/space to toggle, q to quit."


class DeviceListView:
    def __init__(self, registry: DeviceRegistry, commands: CommandSender) -> None:
        self.registry = registry
        self.commands = commands
        self.cursor = 0
        self.message = ""

    def devices(self) -> list[Device]:
        return self.registry.all()

    def selected(self) -> Device | None:
        devices = self.devices()
        if not devices:
            return None
        return devices[min(self.cursor, len(devices) - 1)]

    def move_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def move_down(self) -> None:
        if self.cursor < len(self.registry) - 1:
            self.cursor += 1

    def toggle_selected(self) -> None:
        device = self.selected()
        if device is None:
            return
        try:
            updated = self.commands.toggle_power(device)
        except LampctlError as exc:
            logger.debug("Toggle of %s failed", device.ip, exc_info=True)
            self.message = f"Error: {exc}"
            return
        state = "on" if updated.is_on else "off"
        self.message = f"{updated.name} turned {state}"

    def render(self) -> StyleFragments:
        fragments: StyleFragments = [("bold", "Lamps on this network\n\n")]
        devices = self.devices()
        if not devices:
            fragments.append(("", "  (no lamps found)\n"))

        for index, device in enumerate(devices):
            pointer = ">" if index == self.cursor else " "
            checked = "x" if device.is_on else " "
            style = "reverse" if index == self.cursor else ""
            line = (
                f"{pointer} [{checked}] {device.name:<20} {device.sku:<8} "
                f"{device.ip:<15} {device.brightness:>3}% {device.color.hex()}\n"
            )
            fragments.append((style, line))

        if self.message:
            fragments.append(("italic", f"\n{self.message}\n"))
        fragments.append(("class:footer", f"\n{FOOTER}\n"))
        return fragments
