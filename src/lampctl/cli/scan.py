from __future__ import annotations

import logging

import typer
from rich.console import Console

from .common import (
    build_database,
    devices_table,
    load_settings_or_exit,
    open_session_or_exit,
)

logger = logging.getLogger(__name__)


def scan(
    save: bool = typer.Option(True, help="Save scan results to data directory"),
) -> None:
    """Discover lamps on the local network and show their state."""
    console = Console()

    settings = load_settings_or_exit()
    network = settings.network

    console.print(
        f"Scanning {network.scan_host}:{network.scan_port} "
        f"for {network.discovery_window:g}s..."
    )
    logger.info(
        "Scan settings: window=%.2fs, receive_timeout=%.2fs",
        network.discovery_window,
        network.receive_timeout,
    )
    with open_session_or_exit(settings) as session:
        devices = session.refresh()

    if not devices:
        console.print("No lamps found.")
        return

    console.print(devices_table(devices))
    console.print(f"\n[green]Found {len(devices)} lamp(s)[/green]")

    if save:
        db = build_database(settings)
        db.save_scan(devices)
        console.print(f"[green]✓[/green] Saved scan to {db.current_scan_path}")


def register(app: typer.Typer) -> None:
    app.command()(scan)
