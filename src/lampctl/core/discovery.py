from __future__ import annotations

import enum
import logging
import time

from lampctl.core import codec
from lampctl.core.transport import LanSocket
from lampctl.errors import (
    DecodeError,
    DiscoveryError,
    ReceiveTimeoutError,
    SocketError,
)
from lampctl.models import ScanResult

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 3.0


class DiscoveryState(enum.Enum):
    IDLE = "idle"
    SCAN_SENT = "scan_sent"
    AWAITING_REPLY = "awaiting_reply"
    REPLY_RECEIVED = "reply_received"
    FAILED = "failed"


class DiscoveryClient:
    """Multicast scan for lamps answering on the listener socket."""

    def __init__(self, transport: LanSocket, window: float = DEFAULT_WINDOW) -> None:
        self._transport = transport
        self.window = window
        self.state = DiscoveryState.IDLE

    def _send_scan(self) -> None:
        target = self._transport.endpoints.scan_target
        logger.info("Sending scan to %s", target)
        self._transport.send(codec.encode_scan_request(), target)
        self.state = DiscoveryState.SCAN_SENT

    def _next_reply(self, deadline: float) -> ScanResult:
        """Return the next scan reply before ``deadline``.

        Datagrams that are not scan replies are discarded.
        """
        self.state = DiscoveryState.AWAITING_REPLY
        while True:
            payload, source = self._transport.receive(deadline - time.monotonic())
            try:
                reply = codec.decode_reply(payload)
            except DecodeError:
                logger.warning("Undecodable datagram from %s:%d", *source)
                raise
            if isinstance(reply, codec.ScanReply):
                return codec.scan_result_from_reply(reply)
            logger.debug("Ignoring %r reply from %s:%d", reply.cmd, *source)

    def discover(self) -> list[ScanResult]:
        """Collect every distinct lamp answering within the window.

        The first reply from each IP wins. An empty list means nothing
        answered in time.
        """
        found: dict[str, ScanResult] = {}
        last_error: DecodeError | None = None

        with self._transport.lock:
            try:
                self._send_scan()
            except SocketError as exc:
                self.state = DiscoveryState.FAILED
                raise DiscoveryError(f"Scan failed: {exc}") from exc

            deadline = time.monotonic() + self.window
            while True:
                try:
                    result = self._next_reply(deadline)
                except ReceiveTimeoutError:
                    break
                except DecodeError as exc:
                    last_error = exc
                    continue
                except SocketError as exc:
                    self.state = DiscoveryState.FAILED
                    raise DiscoveryError(f"Scan failed: {exc}") from exc

                if result.ip in found:
                    logger.debug("Duplicate scan reply from %s", result.ip)
                    continue
                logger.debug("Found %s (%s) at %s", result.name, result.sku, result.ip)
                found[result.ip] = result

        if not found and last_error is not None:
            self.state = DiscoveryState.FAILED
            raise DiscoveryError(
                f"No valid scan replies: {last_error}"
            ) from last_error

        self.state = DiscoveryState.REPLY_RECEIVED
        logger.info("Discovery complete: found %d device(s)", len(found))
        return list(found.values())

    def discover_one(self) -> ScanResult:
        """Return the first lamp to answer, failing if none does in time."""
        with self._transport.lock:
            try:
                self._send_scan()
                result = self._next_reply(time.monotonic() + self.window)
            except (SocketError, DecodeError) as exc:
                self.state = DiscoveryState.FAILED
                raise DiscoveryError(f"Scan failed: {exc}") from exc

        self.state = DiscoveryState.REPLY_RECEIVED
        logger.info("Found %s (%s) at %s", result.name, result.sku, result.ip)
        return result
