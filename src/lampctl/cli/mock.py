from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from lampctl.core import run_mock_lamp


def register(app: typer.Typer) -> None:
    @app.command()
    def mock(
        name: str = typer.Option("MockLamp", "--name", "-n", help="Device name"),
        ip: str = typer.Option(
            "127.0.0.1", "--ip", help="IP address to report in scan replies"
        ),
        sku: str = typer.Option("H6159", "--sku", help="SKU to report"),
        bind: str = typer.Option("0.0.0.0", "--bind", help="Address to listen on"),
    ) -> None:
        """Run a simulated lamp for development."""
        console = Console()
        console.print(f"Starting mock lamp '{name}' ({sku}) on {bind}...")
        console.print("Press Ctrl+C to stop.\n")

        try:
            asyncio.run(run_mock_lamp(name=name, ip=ip, sku=sku, bind_host=bind))
        except KeyboardInterrupt:
            console.print("\n[green]Mock lamp stopped.[/green]")
        except OSError as exc:
            typer.echo(f"Cannot start mock lamp: {exc}", err=True)
            raise typer.Exit(1) from exc
