"""The shared UDP socket used for every scan, status and command exchange."""

from __future__ import annotations

import logging
import socket
import struct
import threading
from types import TracebackType

from lampctl.core.addresses import Endpoints, NetworkEndpoint
from lampctl.errors import ReceiveTimeoutError, SocketError

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 512


class LanSocket:
    """UDP socket bound to the reply listener and joined to the multicast group.

    Replies carry no request id, so callers hold ``lock`` for the whole
    send/receive exchange and never overlap two requests.
    """

    def __init__(
        self, endpoints: Endpoints, buffer_size: int = DEFAULT_BUFFER_SIZE
    ) -> None:
        self.endpoints = endpoints
        self.buffer_size = buffer_size
        self.lock = threading.Lock()
        self._sock: socket.socket | None = None

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def open(self) -> LanSocket:
        if self._sock is not None:
            return self
        listener = self.endpoints.listener
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(listener.address)
        except OSError as exc:
            sock.close()
            raise SocketError(f"Cannot bind {listener}: {exc}") from exc

        self._join_group(sock)
        self._sock = sock
        logger.debug("Listening on %s", self.local_address)
        return self

    def _join_group(self, sock: socket.socket) -> None:
        group = self.endpoints.multicast_group
        membership = struct.pack(
            "4s4s", socket.inet_aton(group), socket.inet_aton("0.0.0.0")
        )
        try:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP, 1)
        except OSError as exc:
            logger.warning("Could not join multicast group %s: %s", group, exc)

    def close(self) -> None:
        if self._sock is None:
            return
        self._sock.close()
        self._sock = None
        logger.debug("Socket closed")

    def __enter__(self) -> LanSocket:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def local_address(self) -> tuple[str, int]:
        return self._require_socket().getsockname()[:2]

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise SocketError("Socket is not open")
        return self._sock

    def send(self, payload: bytes, endpoint: NetworkEndpoint) -> None:
        sock = self._require_socket()
        logger.debug("Sending %d bytes to %s: %s", len(payload), endpoint, payload)
        try:
            sock.sendto(payload, endpoint.address)
        except OSError as exc:
            raise SocketError(f"Send to {endpoint} failed: {exc}") from exc

    def receive(self, timeout: float) -> tuple[bytes, tuple[str, int]]:
        """Wait up to ``timeout`` seconds for one datagram."""
        sock = self._require_socket()
        if timeout <= 0:
            raise ReceiveTimeoutError("Receive deadline already passed")
        sock.settimeout(timeout)
        try:
            payload, addr = sock.recvfrom(self.buffer_size)
        except TimeoutError as exc:
            raise ReceiveTimeoutError(
                f"No datagram within {timeout:.2f}s"
            ) from exc
        except OSError as exc:
            raise SocketError(f"Receive failed: {exc}") from exc
        source = (str(addr[0]), int(addr[1]))
        logger.debug("Received %d bytes from %s:%d", len(payload), *source)
        return payload, source
