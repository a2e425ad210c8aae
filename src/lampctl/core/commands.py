from __future__ import annotations

import logging
from typing import Any

from lampctl.core import codec
from lampctl.core.addresses import Endpoints
from lampctl.core.registry import DeviceRegistry
from lampctl.core.transport import LanSocket
from lampctl.errors import (
    AddressResolutionError,
    CommandError,
    DeviceNotFoundError,
    PowerStateError,
    SocketError,
)
from lampctl.models import Color, Device

logger = logging.getLogger(__name__)


class CommandSender:
    """Send state-change commands and record the new state once sent.

    There is no read-back: the registry is updated as soon as the send
    succeeds, and left untouched when it fails.
    """

    def __init__(
        self, transport: LanSocket, endpoints: Endpoints, registry: DeviceRegistry
    ) -> None:
        self._transport = transport
        self._endpoints = endpoints
        self._registry = registry

    def _recorded(self, device: Device) -> Device:
        try:
            return self._registry.get(device.ip)
        except DeviceNotFoundError as exc:
            raise CommandError(f"Cannot command {device.ip}: {exc}") from exc

    def _send(self, device: Device, payload: bytes, **changes: Any) -> Device:
        self._recorded(device)
        try:
            endpoint = self._endpoints.control_endpoint(device.ip)
            with self._transport.lock:
                self._transport.send(payload, endpoint)
        except (SocketError, AddressResolutionError) as exc:
            raise CommandError(f"Command to {device.ip} failed: {exc}") from exc
        logger.debug("Applying %s to %s", changes, device.ip)
        return self._registry.update_state(device.ip, **changes)

    def toggle_power(self, device: Device) -> Device:
        current = self._recorded(device)
        if current.on_off not in (0, 1):
            raise PowerStateError(
                f"Device {device.ip} has power value {current.on_off!r}, "
                "expected 0 or 1"
            )
        return self.set_power(current, not current.is_on)

    def set_power(self, device: Device, on: bool) -> Device:
        value = 1 if on else 0
        logger.info("Turning %s %s", device.ip, "on" if on else "off")
        return self._send(device, codec.encode_turn_request(value), on_off=value)

    def set_brightness(self, device: Device, value: int) -> Device:
        try:
            payload = codec.encode_brightness_request(value)
        except ValueError as exc:
            raise CommandError(str(exc)) from exc
        logger.info("Setting brightness of %s to %d", device.ip, value)
        return self._send(device, payload, brightness=value)

    def set_color(
        self, device: Device, rgb: tuple[int, int, int], kelvin: int = 0
    ) -> Device:
        try:
            color = Color(r=rgb[0], g=rgb[1], b=rgb[2])
            payload = codec.encode_color_request(color, kelvin)
        except ValueError as exc:
            raise CommandError(f"Invalid color {rgb} / {kelvin}K: {exc}") from exc
        logger.info("Setting color of %s to %s (%dK)", device.ip, color.hex(), kelvin)
        return self._send(
            device, payload, color=color.model_dump(), color_temperature=kelvin
        )
