from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import httpx
import typer

from roomlink.config import Settings, get_settings, resolve_config_path
from roomlink.core import ControllerDirectory
from roomlink.network import create_directory


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


@contextmanager
def open_directory(settings: Settings) -> Iterator[ControllerDirectory]:
    """Directory backed by an HTTP client that is closed on exit."""
    with httpx.Client() as client:
        yield create_directory(settings, client=client)
