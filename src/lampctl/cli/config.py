from __future__ import annotations

from typing import Annotated

import typer

from lampctl.config import Settings, render_settings_toml, write_settings
from lampctl.core import resolve_endpoints
from lampctl.errors import AddressResolutionError

from .common import load_settings_or_exit, resolve_config_path_or_exit

app = typer.Typer(no_args_is_help=True, help="Show or create the config file.")


@app.command("show")
def show_config(
    resolve: Annotated[
        bool,
        typer.Option("--resolve/--no-resolve", help="Also resolve the endpoints"),
    ] = True,
) -> None:
    """Show current configuration and the endpoints it resolves to."""
    settings = load_settings_or_exit()
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    source = str(path) if exists else "defaults"
    typer.echo(f"Config source: {source}")
    typer.echo(render_settings_toml(settings))

    if not resolve:
        return

    try:
        endpoints = resolve_endpoints(settings.network)
    except AddressResolutionError as exc:
        typer.echo(f"Endpoints: unresolved ({exc})")
        return

    typer.echo("# resolved")
    typer.echo(f"# scan -> {endpoints.scan_target}")
    typer.echo(f"# listen <- {endpoints.listener}")
    typer.echo(f"# multicast group {endpoints.multicast_group}")
    typer.echo(f"# commands -> <lamp ip>:{endpoints.control_port}")


@app.command("path")
def config_path() -> None:
    """Print the config file location, honouring LAMPCTL_CONFIG."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)
    typer.echo(f"{path}{'' if exists else ' (missing)'}")


@app.command("init")
def init_config(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Write a config file with the standard lamp ports."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    if exists and not force:
        typer.echo(f"Config already exists at {path} (use --force to overwrite)")
        return

    write_settings(Settings(), path)
    network = Settings().network
    typer.echo(
        f"Wrote config to {path} (scan {network.scan_port}, "
        f"listen {network.listen_port}, control {network.control_port})"
    )
