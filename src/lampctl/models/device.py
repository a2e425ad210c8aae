"""Device models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Color(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)

    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


class ScanResult(BaseModel):
    """Identity reported by a lamp in its scan reply."""

    model_config = {"frozen": True, "extra": "forbid"}

    ip: str
    name: str
    sku: str
    ble_version_hard: str
    ble_version_soft: str
    wifi_version_hard: str
    wifi_version_soft: str


class StatusResult(BaseModel):
    """State reported by a lamp in its devStatus reply."""

    model_config = {"frozen": True, "extra": "forbid"}

    on_off: int
    brightness: int = Field(ge=0, le=100)
    color: Color
    color_temperature: int = Field(ge=0)


class Device(BaseModel):
    """A lamp known to the registry: scan identity merged with its last status.

    Keyed by ``ip``. State fields are changed only through the registry.
    """

    model_config = {"extra": "forbid", "validate_assignment": True}

    ip: str
    name: str
    sku: str
    ble_version_hard: str = ""
    ble_version_soft: str = ""
    wifi_version_hard: str = ""
    wifi_version_soft: str = ""

    on_off: int = 0
    brightness: int = Field(default=0, ge=0, le=100)
    color: Color = Field(default_factory=lambda: Color(r=0, g=0, b=0))
    color_temperature: int = Field(default=0, ge=0)

    @classmethod
    def from_results(cls, scan: ScanResult, status: StatusResult) -> Device:
        return cls(
            **scan.model_dump(),
            **status.model_dump(),
        )

    @property
    def is_on(self) -> bool:
        return self.on_off == 1

    def identity(self) -> ScanResult:
        return ScanResult(
            ip=self.ip,
            name=self.name,
            sku=self.sku,
            ble_version_hard=self.ble_version_hard,
            ble_version_soft=self.ble_version_soft,
            wifi_version_hard=self.wifi_version_hard,
            wifi_version_soft=self.wifi_version_soft,
        )

    def status(self) -> StatusResult:
        return StatusResult(
            on_off=self.on_off,
            brightness=self.brightness,
            color=self.color,
            color_temperature=self.color_temperature,
        )


class ScanRecord(BaseModel):
    """Devices found by one discovery run, as cached on disk."""

    model_config = {"extra": "forbid"}

    scan_timestamp: datetime
    devices: list[Device]
