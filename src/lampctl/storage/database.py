from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from lampctl.models import Device, ScanRecord

SCANS_DIR = "scans"
CURRENT_SCAN_FILE = "current.json"


class Database:
    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._scans_dir = data_dir / SCANS_DIR
        self._current_scan_path = self._scans_dir / CURRENT_SCAN_FILE

    @property
    def path(self) -> Path:
        return self._data_dir

    @property
    def current_scan_path(self) -> Path:
        return self._current_scan_path

    def ensure_dirs(self) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._scans_dir.mkdir(parents=True, exist_ok=True)

    def save_scan(self, devices: list[Device]) -> ScanRecord:
        record = ScanRecord(
            scan_timestamp=datetime.now(timezone.utc),
            devices=devices,
        )

        self.ensure_dirs()
        with self._current_scan_path.open("w") as handle:
            json.dump(record.model_dump(mode="json"), handle, indent=2)
        return record

    def load_current_scan(self) -> ScanRecord | None:
        if not self._current_scan_path.exists():
            return None

        try:
            with self._current_scan_path.open("r") as handle:
                data = json.load(handle)
            return ScanRecord.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as exc:
            raise ValueError(
                f"Invalid scan file: {self._current_scan_path}\n{exc}"
            ) from exc
