"""Mock lamp for development and testing without hardware."""

import asyncio
import logging
import socket
import struct
from dataclasses import dataclass, field
from typing import Any

from lampctl.config import CONTROL_PORT, LISTEN_PORT, MULTICAST_GROUP, SCAN_PORT
from lampctl.core import codec
from lampctl.errors import DecodeError
from lampctl.models import Color, ScanResult, StatusResult

logger = logging.getLogger(__name__)

Address = tuple[str, int]


@dataclass
class MockLamp:
    """A simulated lamp answering scan, devStatus and state commands."""

    ip: str = "127.0.0.1"
    name: str = "MockLamp"
    sku: str = "H6159"
    ble_version_hard: str = "1.00"
    ble_version_soft: str = "1.02"
    wifi_version_hard: str = "1.00"
    wifi_version_soft: str = "1.03"

    on_off: int = 0
    brightness: int = 100
    color: Color = field(default_factory=lambda: Color(r=255, g=255, b=255))
    color_temperature: int = 0

    bind_host: str = "0.0.0.0"
    multicast_group: str = MULTICAST_GROUP
    scan_port: int = SCAN_PORT
    reply_port: int = LISTEN_PORT
    control_port: int = CONTROL_PORT

    _transports: list[asyncio.DatagramTransport] = field(
        default_factory=list, repr=False
    )

    def scan_result(self) -> ScanResult:
        return ScanResult(
            ip=self.ip,
            name=self.name,
            sku=self.sku,
            ble_version_hard=self.ble_version_hard,
            ble_version_soft=self.ble_version_soft,
            wifi_version_hard=self.wifi_version_hard,
            wifi_version_soft=self.wifi_version_soft,
        )

    def status_result(self) -> StatusResult:
        return StatusResult(
            on_off=self.on_off,
            brightness=self.brightness,
            color=self.color,
            color_temperature=self.color_temperature,
        )

    def handle_datagram(
        self, payload: bytes, addr: Address
    ) -> tuple[bytes, Address] | None:
        """Apply one request and return the reply to send, if any."""
        try:
            request = codec.decode_request(payload)
        except DecodeError as exc:
            logger.warning("Ignoring malformed request from %s:%d: %s", *addr, exc)
            return None

        logger.debug("Received %r from %s:%d", request.cmd, *addr)

        if isinstance(request, codec.ScanRequest):
            return codec.encode_scan_response(self.scan_result()), (
                addr[0],
                self.reply_port,
            )

        if isinstance(request, codec.StatusRequest):
            return codec.encode_status_response(self.status_result()), addr

        if isinstance(request, codec.TurnRequest):
            self.on_off = request.data.value
            logger.info("Power turned %s", "ON" if self.on_off else "OFF")
        elif isinstance(request, codec.BrightnessRequest):
            self.brightness = request.data.value
            logger.info("Brightness set to %d", self.brightness)
        elif isinstance(request, codec.ColorRequest):
            wire = request.data.color
            self.color = Color(r=wire.r, g=wire.g, b=wire.b)
            self.color_temperature = request.data.color_tem_in_kelvin
            logger.info(
                "Color set to %s (%dK)", self.color.hex(), self.color_temperature
            )
        return None

    def _scan_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((self.bind_host, self.scan_port))
        membership = struct.pack(
            "4s4s", socket.inet_aton(self.multicast_group), socket.inet_aton("0.0.0.0")
        )
        try:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
        except OSError as exc:
            logger.warning("Could not join %s: %s", self.multicast_group, exc)
        sock.setblocking(False)
        return sock

    async def start(self) -> None:
        loop = asyncio.get_running_loop()
        scan_transport, _ = await loop.create_datagram_endpoint(
            lambda: _LampProtocol(self), sock=self._scan_socket()
        )
        control_transport, _ = await loop.create_datagram_endpoint(
            lambda: _LampProtocol(self),
            local_addr=(self.bind_host, self.control_port),
        )
        self._transports = [scan_transport, control_transport]
        # port 0 binds an ephemeral port; record the one actually used
        self.scan_port = scan_transport.get_extra_info("sockname")[1]
        self.control_port = control_transport.get_extra_info("sockname")[1]
        logger.info(
            "Mock lamp '%s' listening for scans on %d and commands on %d",
            self.name,
            self.scan_port,
            self.control_port,
        )

    def stop(self) -> None:
        for transport in self._transports:
            transport.close()
        self._transports = []
        logger.info("Mock lamp '%s' stopped", self.name)

    async def run_forever(self) -> None:
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            self.stop()


class _LampProtocol(asyncio.DatagramProtocol):
    def __init__(self, lamp: MockLamp) -> None:
        self._lamp = lamp
        self._transport: asyncio.DatagramTransport | None = None

    def connection_made(self, transport: Any) -> None:
        self._transport = transport

    def datagram_received(self, data: bytes, addr: Address) -> None:
        reply = self._lamp.handle_datagram(data, (str(addr[0]), int(addr[1])))
        if reply is not None and self._transport is not None:
            payload, destination = reply
            self._transport.sendto(payload, destination)


async def run_mock_lamp(**options: Any) -> None:
    """Run a mock lamp until cancelled."""
    lamp = MockLamp(**options)
    await lamp.run_forever()
