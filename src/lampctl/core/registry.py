from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from typing import Any

from lampctl.errors import DeviceNotFoundError
from lampctl.models import Device

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Known lamps keyed by IP, in insertion order.

    Entries are replaced wholesale by ``upsert`` or have state fields changed
    by ``update_state``; there is never more than one entry per IP.
    """

    def __init__(self, devices: list[Device] | None = None) -> None:
        self._lock = threading.Lock()
        self._devices: dict[str, Device] = {}
        for device in devices or []:
            self.upsert(device)

    def upsert(self, device: Device) -> None:
        with self._lock:
            replaced = device.ip in self._devices
            self._devices[device.ip] = device.model_copy(deep=True)
        logger.debug("%s device %s", "Replaced" if replaced else "Added", device.ip)

    def get(self, ip: str) -> Device:
        with self._lock:
            device = self._devices.get(ip)
            if device is None:
                raise DeviceNotFoundError(ip)
            return device.model_copy(deep=True)

    def all(self) -> list[Device]:
        with self._lock:
            return [device.model_copy(deep=True) for device in self._devices.values()]

    def update_state(self, ip: str, **changes: Any) -> Device:
        """Apply field changes to one entry; nothing changes if validation fails."""
        with self._lock:
            current = self._devices.get(ip)
            if current is None:
                raise DeviceNotFoundError(ip)
            updated = Device.model_validate({**current.model_dump(), **changes})
            self._devices[ip] = updated
            return updated.model_copy(deep=True)

    def __contains__(self, ip: object) -> bool:
        with self._lock:
            return ip in self._devices

    def __len__(self) -> int:
        with self._lock:
            return len(self._devices)

    def __iter__(self) -> Iterator[Device]:
        return iter(self.all())
