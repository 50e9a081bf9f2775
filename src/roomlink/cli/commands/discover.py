from __future__ import annotations

import logging

import typer
from rich.console import Console

from roomlink.cli.common import load_settings_or_exit
from roomlink.core import DiscoveryEngine
from roomlink.network import build_cache

logger = logging.getLogger(__name__)


def discover(
    interface: str | None = typer.Option(
        None,
        "--interface",
        "-i",
        help="Local IPv4 address of the interface to send the probe from",
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", "-t", help="Seconds to collect answers"
    ),
) -> None:
    """Send an SSDP probe and list the devices that answer."""
    console = Console()
    settings = load_settings_or_exit()
    config = settings.discovery

    window = timeout if timeout is not None else config.timeout
    network_interface = interface or config.network_interface
    logger.info(
        "SSDP discovery settings: group=%s:%d, window=%.2fs, interface=%s",
        config.multicast_address,
        config.port,
        window,
        network_interface or "default",
    )

    engine = DiscoveryEngine(build_cache(settings))
    try:
        addresses = engine.discover(
            config.multicast_address,
            window,
            network_interface=network_interface,
            port=config.port,
            mx=config.mx,
            ttl=config.ttl,
        )
    except OSError as exc:
        typer.echo(f"Discovery failed: {exc}", err=True)
        raise typer.Exit(1) from exc

    if not addresses:
        console.print("No devices answered.")
        return

    for address in sorted(addresses):
        console.print(f"  • {address}")
    console.print(f"\n[green]Found {len(addresses)} device(s)[/green]")


def register(app: typer.Typer) -> None:
    app.command()(discover)
