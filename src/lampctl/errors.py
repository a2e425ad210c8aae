"""Exception hierarchy for lampctl."""

from __future__ import annotations


class LampctlError(Exception):
    """Base class for all lampctl errors."""


class AddressResolutionError(LampctlError):
    """A configured endpoint could not be parsed or resolved."""


class SocketError(LampctlError):
    """Bind, send or receive failure on the LAN socket."""


class ReceiveTimeoutError(SocketError, TimeoutError):
    """No datagram arrived before the receive deadline."""


class DecodeError(LampctlError, ValueError):
    """A datagram is not a well-formed envelope of the expected kind."""


class DiscoveryError(LampctlError):
    pass


class QueryError(LampctlError):
    pass


class CommandError(LampctlError):
    pass


class PowerStateError(CommandError):
    """The recorded power value is not 0 or 1."""


class DeviceNotFoundError(LampctlError, LookupError):
    def __init__(self, ip: str) -> None:
        super().__init__(f"No device with IP {ip} in registry")
        self.ip = ip
