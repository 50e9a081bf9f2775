from __future__ import annotations

from typing import Annotated

import typer

from roomlink.utils.logging import setup_logging

from .commands import cache as cache_cmd
from .commands import config as config_cmd
from .commands.devices import register as register_devices
from .commands.discover import register as register_discover
from .commands.groups import register as register_groups

app = typer.Typer(
    help="roomlink - discover speakers and their groups", no_args_is_help=True
)

app.add_typer(config_cmd.app, name="config")
app.add_typer(cache_cmd.app, name="cache")

register_discover(app)
register_devices(app)
register_groups(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
) -> None:
    """roomlink CLI."""
    setup_logging()

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"roomlink version {get_version('roomlink')}")
        raise typer.Exit()
