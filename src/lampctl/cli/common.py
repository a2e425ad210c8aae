from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.table import Table

from lampctl.config import (
    Settings,
    data_dir_from_settings,
    get_settings,
    resolve_config_path,
)
from lampctl.errors import LampctlError
from lampctl.models import Device
from lampctl.services import LampSession
from lampctl.storage import Database


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def build_database(settings: Settings, data_dir: Path | None = None) -> Database:
    path = data_dir or data_dir_from_settings(settings)
    return Database(path)


@contextmanager
def open_session_or_exit(settings: Settings) -> Iterator[LampSession]:
    """Open a LAN session, turning any protocol failure into exit status 1."""
    try:
        with LampSession(settings) as session:
            yield session
    except LampctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


def power_label(device: Device) -> str:
    if device.on_off == 1:
        return "[green]on[/green]"
    if device.on_off == 0:
        return "[dim]off[/dim]"
    return f"[red]?({device.on_off})[/red]"


def devices_table(devices: list[Device]) -> Table:
    table = Table()
    table.add_column("IP", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("SKU")
    table.add_column("Power")
    table.add_column("Brightness", justify="right")
    table.add_column("Color")
    table.add_column("Kelvin", justify="right")
    table.add_column("BLE hw/sw")
    table.add_column("WiFi hw/sw")

    for device in devices:
        hex_color = device.color.hex()
        table.add_row(
            device.ip,
            device.name,
            device.sku,
            power_label(device),
            f"{device.brightness}%",
            f"[{hex_color}]■[/] {hex_color}",
            str(device.color_temperature or "-"),
            f"{device.ble_version_hard}/{device.ble_version_soft}",
            f"{device.wifi_version_hard}/{device.wifi_version_soft}",
        )
    return table
