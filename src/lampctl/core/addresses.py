"""Resolution of the fixed protocol endpoints into socket addresses."""

from __future__ import annotations

import ipaddress
import logging
import socket
from dataclasses import dataclass

from lampctl.config import NetworkConfig
from lampctl.errors import AddressResolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkEndpoint:
    host: str
    port: int

    @property
    def address(self) -> tuple[str, int]:
        return (self.host, self.port)

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class Endpoints:
    """The resolved scan target, reply listener and per-device control port."""

    scan_target: NetworkEndpoint
    listener: NetworkEndpoint
    multicast_group: str
    control_port: int

    def control_endpoint(self, ip: str) -> NetworkEndpoint:
        try:
            address = ipaddress.IPv4Address(ip)
        except ValueError as exc:
            raise AddressResolutionError(f"Invalid device IP {ip!r}") from exc
        return NetworkEndpoint(str(address), self.control_port)


def resolve_endpoint(host: str, port: int) -> NetworkEndpoint:
    try:
        infos = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_DGRAM)
    except (socket.gaierror, UnicodeError) as exc:
        raise AddressResolutionError(f"Cannot resolve {host}:{port}: {exc}") from exc
    if not infos:
        raise AddressResolutionError(f"No IPv4 address for {host}:{port}")
    resolved_host, resolved_port = infos[0][4][:2]
    return NetworkEndpoint(str(resolved_host), int(resolved_port))


def resolve_endpoints(config: NetworkConfig) -> Endpoints:
    scan_target = resolve_endpoint(config.scan_host, config.scan_port)
    listener = resolve_endpoint(config.listen_host, config.listen_port)
    try:
        group = ipaddress.IPv4Address(config.multicast_group)
    except ValueError as exc:
        raise AddressResolutionError(
            f"Invalid multicast group {config.multicast_group!r}"
        ) from exc
    if not group.is_multicast:
        raise AddressResolutionError(f"{group} is not a multicast address")

    endpoints = Endpoints(
        scan_target=scan_target,
        listener=listener,
        multicast_group=str(group),
        control_port=config.control_port,
    )
    logger.debug(
        "Resolved endpoints: scan=%s listen=%s control_port=%d",
        endpoints.scan_target,
        endpoints.listener,
        endpoints.control_port,
    )
    return endpoints
