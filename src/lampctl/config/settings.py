from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .paths import default_config_path, default_data_dir, expand_path

CONFIG_ENV_VAR = "LAMPCTL_CONFIG"

MULTICAST_GROUP = "239.255.255.250"
SCAN_PORT = 4001
LISTEN_PORT = 4002
CONTROL_PORT = 4003


class DatabaseConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    path: str = Field(default_factory=lambda: str(default_data_dir()))


class NetworkConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    scan_host: str = MULTICAST_GROUP
    scan_port: int = Field(default=SCAN_PORT, ge=1, le=65535)
    listen_host: str = "0.0.0.0"
    listen_port: int = Field(default=LISTEN_PORT, ge=0, le=65535)
    multicast_group: str = MULTICAST_GROUP
    control_port: int = Field(default=CONTROL_PORT, ge=1, le=65535)
    receive_timeout: float = Field(default=2.0, gt=0)
    discovery_window: float = Field(default=3.0, gt=0)
    buffer_size: int = Field(default=512, ge=64, le=65535)


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def data_dir_from_settings(settings: Settings) -> Path:
    return expand_path(settings.database.path)


def _toml_string(value: str) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    network = settings.network
    lines = [
        "# lampctl configuration",
        "",
        "[database]",
        f"path = {_toml_string(settings.database.path)}",
        "",
        "[network]",
        f"scan_host = {_toml_string(network.scan_host)}",
        f"scan_port = {network.scan_port}",
        f"listen_host = {_toml_string(network.listen_host)}",
        f"listen_port = {network.listen_port}",
        f"multicast_group = {_toml_string(network.multicast_group)}",
        f"control_port = {network.control_port}",
        f"receive_timeout = {network.receive_timeout}",
        f"discovery_window = {network.discovery_window}",
        f"buffer_size = {network.buffer_size}",
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
