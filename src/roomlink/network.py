"""Wires the discovery, registry, topology and directory layers together."""

from __future__ import annotations

import httpx

from roomlink.config import Settings, data_dir_from_settings
from roomlink.core import (
    ControllerDirectory,
    DeviceRegistry,
    DiscoveryEngine,
    TopologyResolver,
)
from roomlink.soap import SoapActionInvoker
from roomlink.storage import AddressCache, FileAddressCache


def build_cache(settings: Settings) -> FileAddressCache:
    return FileAddressCache(data_dir_from_settings(settings))


def create_directory(
    settings: Settings,
    cache: AddressCache | None = None,
    client: httpx.Client | None = None,
) -> ControllerDirectory:
    cache = cache if cache is not None else build_cache(settings)
    client = client if client is not None else httpx.Client()
    devices = settings.devices

    registry = DeviceRegistry(
        DiscoveryEngine(cache),
        cache,
        client,
        discovery=settings.discovery,
        devices=devices,
    )
    resolver = TopologyResolver(client, devices)

    def _invoker(address: str) -> SoapActionInvoker:
        return SoapActionInvoker(
            address, client, port=devices.port, timeout=devices.timeout
        )

    return ControllerDirectory(registry, resolver, _invoker)
