from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from roomlink.cli.common import load_settings_or_exit, open_directory
from roomlink.errors import RoomlinkError


def groups() -> None:
    """Show each group, its coordinator and its members."""
    settings = load_settings_or_exit()

    try:
        with open_directory(settings) as directory:
            controllers = directory.controllers()
    except (RoomlinkError, OSError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    table = Table()
    table.add_column("Group", style="cyan")
    table.add_column("Coordinator", style="green")
    table.add_column("IP")
    table.add_column("Members", style="yellow")

    for controller in sorted(controllers, key=lambda item: item.room):
        members = ", ".join(
            member.room
            for member in controller.members
            if member.address != controller.address
        )
        table.add_row(controller.group, controller.room, controller.address, members)

    Console().print(table)


def register(app: typer.Typer) -> None:
    app.command()(groups)
