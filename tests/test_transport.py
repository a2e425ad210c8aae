from __future__ import annotations

import pytest

from lampctl.config import NetworkConfig
from lampctl.core import LanSocket, NetworkEndpoint, resolve_endpoints
from lampctl.errors import ReceiveTimeoutError, SocketError


@pytest.fixture
def loopback_socket():
    endpoints = resolve_endpoints(NetworkConfig(listen_host="127.0.0.1", listen_port=0))
    with LanSocket(endpoints) as sock:
        yield sock


def test_send_and_receive_on_loopback(loopback_socket: LanSocket):
    host, port = loopback_socket.local_address
    loopback_socket.send(b"hello", NetworkEndpoint(host, port))

    payload, source = loopback_socket.receive(timeout=1.0)

    assert payload == b"hello"
    assert source == (host, port)


def test_receive_times_out(loopback_socket: LanSocket):
    with pytest.raises(ReceiveTimeoutError):
        loopback_socket.receive(timeout=0.05)


def test_timeout_error_is_builtin_timeout(loopback_socket: LanSocket):
    with pytest.raises(TimeoutError):
        loopback_socket.receive(timeout=0)


def test_datagram_truncated_to_buffer_size():
    endpoints = resolve_endpoints(NetworkConfig(listen_host="127.0.0.1", listen_port=0))
    with LanSocket(endpoints, buffer_size=64) as sock:
        host, port = sock.local_address
        sock.send(b"x" * 200, NetworkEndpoint(host, port))
        payload, _ = sock.receive(timeout=1.0)
    assert len(payload) <= 64


def test_closed_socket_rejects_io():
    endpoints = resolve_endpoints(NetworkConfig(listen_host="127.0.0.1", listen_port=0))
    sock = LanSocket(endpoints)
    sock.open()
    sock.close()
    sock.close()

    assert not sock.is_open
    with pytest.raises(SocketError):
        sock.send(b"x", NetworkEndpoint("127.0.0.1", 9))
    with pytest.raises(SocketError):
        sock.receive(timeout=0.1)


def test_socket_closed_when_block_raises():
    endpoints = resolve_endpoints(NetworkConfig(listen_host="127.0.0.1", listen_port=0))
    sock = LanSocket(endpoints)
    with pytest.raises(RuntimeError):
        with sock:
            raise RuntimeError("boom")
    assert not sock.is_open

