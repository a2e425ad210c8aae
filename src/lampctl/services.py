"""Session wiring and registry population."""

from __future__ import annotations

import logging
from types import TracebackType

from lampctl.config import Settings
from lampctl.core import (
    CommandSender,
    DeviceRegistry,
    DiscoveryClient,
    Endpoints,
    LanSocket,
    StatusQuery,
    resolve_endpoints,
)
from lampctl.errors import AddressResolutionError, QueryError
from lampctl.models import Device, ScanResult

logger = logging.getLogger(__name__)


def fetch_device(
    status_query: StatusQuery, endpoints: Endpoints, scan: ScanResult
) -> Device:
    """Merge a scan reply with a fresh status query into a Device."""
    try:
        endpoint = endpoints.control_endpoint(scan.ip)
    except AddressResolutionError as exc:
        raise QueryError(f"Cannot query {scan.ip}: {exc}") from exc
    status = status_query.fetch_status(endpoint)
    return Device.from_results(scan, status)


def populate_registry(
    discovery: DiscoveryClient,
    status_query: StatusQuery,
    registry: DeviceRegistry,
    endpoints: Endpoints,
) -> list[Device]:
    """Discover lamps, query each one and upsert the merged result.

    A lamp whose status cannot be fetched is skipped rather than added
    with partial state.
    """
    devices: list[Device] = []
    for scan in discovery.discover():
        try:
            device = fetch_device(status_query, endpoints, scan)
        except QueryError as exc:
            logger.warning("Skipping %s (%s): %s", scan.name, scan.ip, exc)
            continue
        registry.upsert(device)
        devices.append(device)
    return devices


class LampSession:
    """Open LAN socket plus the components that share it."""

    def __init__(
        self,
        settings: Settings,
        registry: DeviceRegistry | None = None,
        transport: LanSocket | None = None,
    ) -> None:
        network = settings.network
        self.endpoints = resolve_endpoints(network)
        if transport is None:
            transport = LanSocket(self.endpoints, buffer_size=network.buffer_size)
        self.transport = transport
        self.registry = registry if registry is not None else DeviceRegistry()
        self.discovery = DiscoveryClient(
            self.transport, window=network.discovery_window
        )
        self.status_query = StatusQuery(self.transport, timeout=network.receive_timeout)
        self.commands = CommandSender(self.transport, self.endpoints, self.registry)

    def open(self) -> LampSession:
        self.transport.open()
        return self

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> LampSession:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def refresh(self) -> list[Device]:
        return populate_registry(
            self.discovery, self.status_query, self.registry, self.endpoints
        )

    def refresh_device(self, ip: str) -> Device:
        """Re-query one known lamp and replace its registry entry."""
        current = self.registry.get(ip)
        device = fetch_device(self.status_query, self.endpoints, current.identity())
        self.registry.upsert(device)
        return device

    def probe(self, ip: str) -> Device:
        """Query a lamp by IP without a scan and register it.

        Identity fields other than the IP are taken from the registry when
        the lamp is already known, and left as placeholders otherwise.
        """
        if ip in self.registry:
            return self.refresh_device(ip)
        identity = ScanResult(
            ip=ip,
            name=ip,
            sku="",
            ble_version_hard="",
            ble_version_soft="",
            wifi_version_hard="",
            wifi_version_soft="",
        )
        device = fetch_device(self.status_query, self.endpoints, identity)
        self.registry.upsert(device)
        return device
