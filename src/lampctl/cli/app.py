from __future__ import annotations

from typing import Annotated

import typer

from lampctl.utils.logging import setup_logging

from . import config as config_cmd
from .control import register as register_control
from .info import register as register_info
from .mock import register as register_mock
from .scan import register as register_scan
from .ui import register as register_ui

app = typer.Typer(
    help="lampctl - discover and control smart lamps on the LAN", no_args_is_help=True
)

app.add_typer(config_cmd.app, name="config")

register_scan(app)
register_control(app)
register_ui(app)
register_info(app)
register_mock(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging"),
    ] = False,
) -> None:
    """lampctl CLI."""
    setup_logging("DEBUG" if verbose else None)

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"lampctl version {get_version('lampctl')}")
        raise typer.Exit()
