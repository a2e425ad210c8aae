"""Wire codec for the lamp LAN protocol.

Every datagram is a JSON envelope ``{"msg": {"cmd": <tag>, "data": {...}}}``.
The ``cmd`` tag selects the payload shape, so requests and replies are each
modelled as a closed union discriminated on ``cmd``. Requests and replies are
separate unions because ``scan`` is used in both directions with different
payloads. Field types are checked strictly, so a quoted number or a
boolean where an integer is expected fails to decode.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lampctl.errors import DecodeError
from lampctl.models import Color, ScanResult, StatusResult

ACCOUNT_TOPIC = "reserve"


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", strict=True)


class WireColor(_Wire):
    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)


# Requests


class ScanRequestData(_Wire):
    account_topic: Literal["reserve"] = ACCOUNT_TOPIC


class ScanRequest(_Wire):
    cmd: Literal["scan"] = "scan"
    data: ScanRequestData = Field(default_factory=ScanRequestData)


class StatusRequestData(_Wire):
    pass


class StatusRequest(_Wire):
    cmd: Literal["devStatus"] = "devStatus"
    data: StatusRequestData = Field(default_factory=StatusRequestData)


class TurnRequestData(_Wire):
    value: Literal[0, 1]


class TurnRequest(_Wire):
    cmd: Literal["turn"] = "turn"
    data: TurnRequestData


class BrightnessRequestData(_Wire):
    value: int = Field(ge=1, le=100)


class BrightnessRequest(_Wire):
    cmd: Literal["brightness"] = "brightness"
    data: BrightnessRequestData


class ColorRequestData(_Wire):
    color: WireColor
    color_tem_in_kelvin: int = Field(default=0, ge=0, alias="colorTemInKelvin")


class ColorRequest(_Wire):
    cmd: Literal["colorwc"] = "colorwc"
    data: ColorRequestData


Request = Annotated[
    Union[ScanRequest, StatusRequest, TurnRequest, BrightnessRequest, ColorRequest],
    Field(discriminator="cmd"),
]


# Replies


class ScanReplyData(_Wire):
    ip: str
    device: str
    sku: str
    ble_version_hard: str = Field(alias="bleVersionHard")
    ble_version_soft: str = Field(alias="bleVersionSoft")
    wifi_version_hard: str = Field(alias="wifiVersionHard")
    wifi_version_soft: str = Field(alias="wifiVersionSoft")


class ScanReply(_Wire):
    cmd: Literal["scan"] = "scan"
    data: ScanReplyData


class StatusReplyData(_Wire):
    on_off: int = Field(alias="onOff")
    brightness: int = Field(ge=0, le=100)
    color: WireColor
    color_tem_in_kelvin: int = Field(ge=0, alias="colorTemInKelvin")


class StatusReply(_Wire):
    cmd: Literal["devStatus"] = "devStatus"
    data: StatusReplyData


Reply = Annotated[Union[ScanReply, StatusReply], Field(discriminator="cmd")]


class RequestEnvelope(_Wire):
    msg: Request


class ReplyEnvelope(_Wire):
    msg: Reply


def _encode(envelope: _Wire) -> bytes:
    return envelope.model_dump_json(by_alias=True).encode("utf-8")


def encode_request(request: Request) -> bytes:
    return _encode(RequestEnvelope(msg=request))


def encode_reply(reply: Reply) -> bytes:
    return _encode(ReplyEnvelope(msg=reply))


def decode_request(payload: bytes) -> Request:
    try:
        return RequestEnvelope.model_validate_json(payload).msg
    except ValidationError as exc:
        raise DecodeError(f"Malformed request envelope: {exc}") from exc


def decode_reply(payload: bytes) -> Reply:
    try:
        return ReplyEnvelope.model_validate_json(payload).msg
    except ValidationError as exc:
        raise DecodeError(f"Malformed reply envelope: {exc}") from exc


def encode_scan_request() -> bytes:
    return encode_request(ScanRequest())


def encode_status_request() -> bytes:
    return encode_request(StatusRequest())


def encode_turn_request(value: int) -> bytes:
    if value not in (0, 1):
        raise ValueError(f"turn value must be 0 or 1, got {value!r}")
    return encode_request(TurnRequest(data=TurnRequestData(value=value)))


def encode_brightness_request(value: int) -> bytes:
    try:
        data = BrightnessRequestData(value=value)
    except ValidationError as exc:
        raise ValueError(f"brightness must be 1-100, got {value!r}") from exc
    return encode_request(BrightnessRequest(data=data))


def encode_color_request(color: Color, kelvin: int = 0) -> bytes:
    try:
        data = ColorRequestData(
            color=WireColor(r=color.r, g=color.g, b=color.b),
            color_tem_in_kelvin=kelvin,
        )
    except ValidationError as exc:
        raise ValueError(f"Invalid color command: {exc}") from exc
    return encode_request(ColorRequest(data=data))


def scan_result_from_reply(reply: ScanReply) -> ScanResult:
    data = reply.data
    return ScanResult(
        ip=data.ip,
        name=data.device,
        sku=data.sku,
        ble_version_hard=data.ble_version_hard,
        ble_version_soft=data.ble_version_soft,
        wifi_version_hard=data.wifi_version_hard,
        wifi_version_soft=data.wifi_version_soft,
    )


def status_result_from_reply(reply: StatusReply) -> StatusResult:
    data = reply.data
    return StatusResult(
        on_off=data.on_off,
        brightness=data.brightness,
        color=Color(r=data.color.r, g=data.color.g, b=data.color.b),
        color_temperature=data.color_tem_in_kelvin,
    )


def decode_scan_response(payload: bytes) -> ScanResult:
    reply = decode_reply(payload)
    if not isinstance(reply, ScanReply):
        raise DecodeError(f"Expected a scan reply, got {reply.cmd!r}")
    return scan_result_from_reply(reply)


def decode_status_response(payload: bytes) -> StatusResult:
    reply = decode_reply(payload)
    if not isinstance(reply, StatusReply):
        raise DecodeError(f"Expected a devStatus reply, got {reply.cmd!r}")
    return status_result_from_reply(reply)


def encode_scan_response(result: ScanResult) -> bytes:
    data = ScanReplyData(
        ip=result.ip,
        device=result.name,
        sku=result.sku,
        ble_version_hard=result.ble_version_hard,
        ble_version_soft=result.ble_version_soft,
        wifi_version_hard=result.wifi_version_hard,
        wifi_version_soft=result.wifi_version_soft,
    )
    return encode_reply(ScanReply(data=data))


def encode_status_response(status: StatusResult) -> bytes:
    data = StatusReplyData(
        on_off=status.on_off,
        brightness=status.brightness,
        color=WireColor(r=status.color.r, g=status.color.g, b=status.color.b),
        color_tem_in_kelvin=status.color_temperature,
    )
    return encode_reply(StatusReply(data=data))
