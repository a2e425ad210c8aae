from __future__ import annotations

import logging
import time

from lampctl.core import codec
from lampctl.core.addresses import NetworkEndpoint
from lampctl.core.transport import LanSocket
from lampctl.errors import DecodeError, QueryError, SocketError
from lampctl.models import StatusResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 2.0


class StatusQuery:
    """Request a lamp's devStatus over the shared listener socket."""

    def __init__(self, transport: LanSocket, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._transport = transport
        self.timeout = timeout

    def fetch_status(self, device: NetworkEndpoint) -> StatusResult:
        with self._transport.lock:
            try:
                self._transport.send(codec.encode_status_request(), device)
                return self._await_reply(device, time.monotonic() + self.timeout)
            except (SocketError, DecodeError) as exc:
                raise QueryError(f"Status query to {device} failed: {exc}") from exc

    def _await_reply(self, device: NetworkEndpoint, deadline: float) -> StatusResult:
        while True:
            payload, source = self._transport.receive(deadline - time.monotonic())
            if source[0] != device.host:
                logger.debug("Ignoring datagram from %s:%d", *source)
                continue
            reply = codec.decode_reply(payload)
            if isinstance(reply, codec.StatusReply):
                status = codec.status_result_from_reply(reply)
                logger.debug("Status of %s: %s", device.host, status)
                return status
            logger.debug("Ignoring %r reply from %s", reply.cmd, device.host)
