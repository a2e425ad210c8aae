"""Data models for lampctl."""

from lampctl.models.device import (
    Color,
    Device,
    ScanRecord,
    ScanResult,
    StatusResult,
)

__all__ = [
    "Color",
    "Device",
    "ScanRecord",
    "ScanResult",
    "StatusResult",
]
