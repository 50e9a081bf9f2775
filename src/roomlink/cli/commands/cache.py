from __future__ import annotations

import typer
from rich.console import Console

from roomlink.cli.common import load_settings_or_exit
from roomlink.core import ADDRESS_CACHE_KEY
from roomlink.errors import CacheUnavailable
from roomlink.network import build_cache

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_cache() -> None:
    """List the cached device addresses."""
    settings = load_settings_or_exit()
    cache = build_cache(settings)
    console = Console()

    try:
        addresses = cache.get(ADDRESS_CACHE_KEY)
    except CacheUnavailable as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    console.print(f"Cache file: {cache.path}")
    if not addresses:
        console.print("No cached addresses.")
        return
    for address in sorted(addresses):
        console.print(f"  • {address}")


@app.command("clear")
def clear_cache() -> None:
    """Forget every cached device address."""
    settings = load_settings_or_exit()
    cache = build_cache(settings)

    try:
        cache.clear()
    except CacheUnavailable as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    Console().print(f"[green]✓[/green] Cleared {cache.path}")
