from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from roomlink.cli.common import load_settings_or_exit, resolve_config_path_or_exit
from roomlink.config import Settings, render_settings_toml, write_settings

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config() -> None:
    """Show the effective configuration and where it came from."""
    settings = load_settings_or_exit()
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    typer.echo(f"Config source: {path if exists else 'defaults'}")
    typer.echo(render_settings_toml(settings))


@app.command("init")
def init_config(
    interface: Annotated[
        str | None,
        typer.Option(
            "--interface", "-i", help="Local IPv4 address to send discovery from"
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config"),
    ] = False,
) -> None:
    """Write a default configuration file."""
    console = Console()

    path, exists = resolve_config_path_or_exit(allow_missing=True)
    if exists and not force:
        console.print(f"[dim]Config exists:[/dim] {path}")
        return

    try:
        settings = Settings.model_validate(
            {"discovery": {"network_interface": interface}}
        )
    except ValueError as exc:
        typer.echo(f"Invalid interface address: {interface}", err=True)
        raise typer.Exit(1) from exc

    write_settings(settings, path)
    action = "Overwrote" if exists else "Created"
    console.print(f"[green]✓[/green] {action} config: {path}")
