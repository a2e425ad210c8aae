from __future__ import annotations

import typer
from prompt_toolkit.application import Application
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import Layout
from prompt_toolkit.layout.containers import Window
from prompt_toolkit.layout.controls import FormattedTextControl
from rich.console import Console

from .common import load_settings_or_exit, open_session_or_exit
from .view import DeviceListView


def create_key_bindings(view: DeviceListView) -> KeyBindings:
    kb = KeyBindings()

    @kb.add("q")
    @kb.add("c-c")
    def _(event):  # type: ignore[no-untyped-def]
        """Quit."""
        event.app.exit()

    @kb.add("up")
    @kb.add("k")
    def _(event):  # type: ignore[no-untyped-def]
        view.move_up()

    @kb.add("down")
    @kb.add("j")
    def _(event):  # type: ignore[no-untyped-def]
        view.move_down()

    @kb.add("enter")
    @kb.add(" ")
    def _(event):  # type: ignore[no-untyped-def]
        """Toggle power; blocks until the command is sent."""
        view.toggle_selected()

    return kb


def create_application(view: DeviceListView) -> Application[None]:
    control = FormattedTextControl(view.render, focusable=True, show_cursor=False)
    return Application(
        layout=Layout(Window(content=control, wrap_lines=False)),
        key_bindings=create_key_bindings(view),
        full_screen=False,
    )


def ui() -> None:
    """Pick lamps from a list and toggle their power."""
    console = Console()
    settings = load_settings_or_exit()

    with open_session_or_exit(settings) as session:
        console.print("Scanning for lamps...")
        devices = session.refresh()
        if not devices:
            console.print("No lamps found.")
            raise typer.Exit(1)

        view = DeviceListView(session.registry, session.commands)
        create_application(view).run()


def register(app: typer.Typer) -> None:
    app.command()(ui)
