from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from roomlink.cli.common import load_settings_or_exit, open_directory
from roomlink.errors import RoomlinkError


def list_devices() -> None:
    """List known devices and whether they can play audio."""
    settings = load_settings_or_exit()

    try:
        with open_directory(settings) as directory:
            devices = directory.registry.devices()
    except (RoomlinkError, OSError) as exc:
        typer.echo(f"Could not list devices: {exc}", err=True)
        raise typer.Exit(1) from exc

    console = Console()
    if not devices:
        console.print("No devices found.")
        raise typer.Exit(1)

    table = Table()
    table.add_column("IP", style="cyan")
    table.add_column("Room", style="green")
    table.add_column("Model")
    table.add_column("Playback")
    table.add_column("Reachable")

    for device in devices:
        table.add_row(
            device.address,
            device.room,
            device.model_name or device.model,
            "yes" if device.playback_capable else "no",
            "yes" if device.reachable else "[red]no[/red]",
        )

    console.print(table)


def register(app: typer.Typer) -> None:
    app.command("devices")(list_devices)
