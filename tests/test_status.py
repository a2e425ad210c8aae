from __future__ import annotations

import pytest

from lampctl.core import StatusQuery, codec
from lampctl.errors import QueryError, SocketError
from lampctl.models import Color


def test_fetch_status_from_control_endpoint(network, endpoints):
    endpoint = endpoints.control_endpoint("192.168.1.50")

    status = StatusQuery(network).fetch_status(endpoint)

    assert network.sent == [(b'{"msg":{"cmd":"devStatus","data":{}}}', endpoint)]
    assert status.on_off == 0
    assert status.brightness == 80
    assert status.color == Color(r=255, g=128, b=0)


def test_replies_from_other_hosts_are_discarded(network, endpoints, lamp):
    other = lamp.status_result().model_copy(update={"brightness": 1})
    network.inject(codec.encode_status_response(other), ("192.168.1.77", 4003))

    status = StatusQuery(network).fetch_status(endpoints.control_endpoint(lamp.ip))

    assert status.brightness == 80


def test_scan_reply_from_device_is_discarded(network, endpoints, lamp):
    network.inject(codec.encode_scan_response(lamp.scan_result()), (lamp.ip, 4003))

    status = StatusQuery(network).fetch_status(endpoints.control_endpoint(lamp.ip))

    assert status.brightness == 80


def test_silent_device_times_out(make_network, endpoints):
    query = StatusQuery(make_network(), timeout=0.01)

    with pytest.raises(QueryError):
        query.fetch_status(endpoints.control_endpoint("192.168.1.50"))


def test_malformed_reply_fails_query(make_network, endpoints):
    network = make_network()
    network.inject(
        b'{"msg":{"cmd":"devStatus","data":{"onOff":1}}}', ("192.168.1.50", 4003)
    )

    with pytest.raises(QueryError):
        StatusQuery(network).fetch_status(endpoints.control_endpoint("192.168.1.50"))


def test_send_failure_fails_query(network, endpoints):
    network.send_error = SocketError("Network is unreachable")

    with pytest.raises(QueryError) as excinfo:
        StatusQuery(network).fetch_status(endpoints.control_endpoint("192.168.1.50"))

    assert isinstance(excinfo.value.__cause__, SocketError)
