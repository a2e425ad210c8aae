from __future__ import annotations

import typer
from rich.console import Console

from .common import build_database, load_settings_or_exit, resolve_config_path_or_exit


def register(app: typer.Typer) -> None:
    @app.command()
    def info() -> None:
        """Show configuration, endpoints and the last saved scan."""
        settings = load_settings_or_exit()
        db = build_database(settings)
        try:
            current_scan = db.load_current_scan()
        except ValueError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(1) from exc

        config_path, config_exists = resolve_config_path_or_exit(allow_missing=True)
        network = settings.network

        console = Console()

        console.print("[bold]lampctl Info[/bold]\n")
        console.print(f"Data directory: {db.path}")
        console.print(f"Config file: {config_path if config_exists else 'defaults'}")

        console.print("\n[bold]Network[/bold]")
        console.print(f"Scan target: {network.scan_host}:{network.scan_port}")
        console.print(f"Listener: {network.listen_host}:{network.listen_port}")
        console.print(f"Multicast group: {network.multicast_group}")
        console.print(f"Control port: {network.control_port}")
        console.print(f"Discovery window: {network.discovery_window}s")
        console.print(f"Receive timeout: {network.receive_timeout}s")

        console.print("\n[bold]Last scan[/bold]")
        if current_scan:
            console.print(f"Time: {current_scan.scan_timestamp}")
            console.print(f"Lamps found: {len(current_scan.devices)}")
            for device in current_scan.devices:
                console.print(f"  • {device.name} ({device.sku}) at {device.ip}")
        else:
            console.print("No scans recorded yet")
