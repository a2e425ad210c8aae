from __future__ import annotations

from collections.abc import Callable

import typer
from rich.console import Console

from lampctl.models import Device
from lampctl.services import LampSession

from .common import devices_table, load_settings_or_exit, open_session_or_exit

Action = Callable[[LampSession, Device], Device]

IP_ARGUMENT = typer.Argument(..., help="Lamp IP address")


def _show(device: Device) -> None:
    Console().print(devices_table([device]))


def status(ip: str = IP_ARGUMENT) -> None:
    """Query and show one lamp's state."""
    settings = load_settings_or_exit()
    with open_session_or_exit(settings) as session:
        device = session.probe(ip)
    _show(device)


def _run(ip: str, action: str, apply: Action) -> None:
    settings = load_settings_or_exit()
    with open_session_or_exit(settings) as session:
        device = session.probe(ip)
        updated = apply(session, device)
    Console().print(f"[green]✓[/green] {action} {updated.name} ({updated.ip})")
    _show(updated)


def turn_on(ip: str = IP_ARGUMENT) -> None:
    """Turn a lamp on."""

    def apply(session: LampSession, device: Device) -> Device:
        return session.commands.set_power(device, True)

    _run(ip, "Turned on", apply)


def turn_off(ip: str = IP_ARGUMENT) -> None:
    """Turn a lamp off."""

    def apply(session: LampSession, device: Device) -> Device:
        return session.commands.set_power(device, False)

    _run(ip, "Turned off", apply)


def toggle(ip: str = IP_ARGUMENT) -> None:
    """Toggle a lamp's power."""

    def apply(session: LampSession, device: Device) -> Device:
        return session.commands.toggle_power(device)

    _run(ip, "Toggled", apply)


def brightness(
    ip: str = IP_ARGUMENT,
    value: int = typer.Argument(..., min=1, max=100, help="Brightness 1-100"),
) -> None:
    """Set a lamp's brightness."""

    def apply(session: LampSession, device: Device) -> Device:
        return session.commands.set_brightness(device, value)

    _run(ip, f"Brightness {value}% on", apply)


def color(
    ip: str = IP_ARGUMENT,
    red: int = typer.Argument(..., min=0, max=255),
    green: int = typer.Argument(..., min=0, max=255),
    blue: int = typer.Argument(..., min=0, max=255),
    kelvin: int = typer.Option(0, "--kelvin", "-k", min=0, help="Color temperature"),
) -> None:
    """Set a lamp's RGB color and optional color temperature."""

    def apply(session: LampSession, device: Device) -> Device:
        return session.commands.set_color(device, (red, green, blue), kelvin)

    _run(ip, "Color set on", apply)


def register(app: typer.Typer) -> None:
    app.command()(status)
    app.command("on")(turn_on)
    app.command("off")(turn_off)
    app.command()(toggle)
    app.command()(brightness)
    app.command()(color)
