from __future__ import annotations

from .addresses import Endpoints, NetworkEndpoint, resolve_endpoints
from .commands import CommandSender
from .discovery import DiscoveryClient, DiscoveryState
from .mock_lamp import MockLamp, run_mock_lamp
from .registry import DeviceRegistry
from .status import StatusQuery
from .transport import LanSocket

__all__ = [
    "CommandSender",
    "DeviceRegistry",
    "DiscoveryClient",
    "DiscoveryState",
    "Endpoints",
    "LanSocket",
    "MockLamp",
    "NetworkEndpoint",
    "StatusQuery",
    "resolve_endpoints",
    "run_mock_lamp",
]
