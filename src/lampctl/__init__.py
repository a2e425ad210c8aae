"""lampctl - discover and control smart lamps over their LAN UDP protocol."""

from __future__ import annotations

from importlib.metadata import version

from .config import NetworkConfig, Settings, get_settings
from .core import (
    CommandSender,
    DeviceRegistry,
    DiscoveryClient,
    LanSocket,
    StatusQuery,
    resolve_endpoints,
)
from .models import Color, Device, ScanResult, StatusResult
from .services import LampSession, populate_registry

__all__ = [
    "Color",
    "CommandSender",
    "Device",
    "DeviceRegistry",
    "DiscoveryClient",
    "LampSession",
    "LanSocket",
    "NetworkConfig",
    "ScanResult",
    "Settings",
    "StatusQuery",
    "StatusResult",
    "__version__",
    "get_settings",
    "populate_registry",
    "resolve_endpoints",
]

__version__ = version("lampctl")
