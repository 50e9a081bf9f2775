from __future__ import annotations

from .directory import Controller, ControllerDirectory
from .discovery import ADDRESS_CACHE_KEY, ZONE_PLAYER_ST, DiscoveryEngine
from .registry import DeviceRegistry
from .state import Memo, Resolved, Stale
from .topology import TopologyResolver

__all__ = [
    "ADDRESS_CACHE_KEY",
    "ZONE_PLAYER_ST",
    "Controller",
    "ControllerDirectory",
    "DeviceRegistry",
    "DiscoveryEngine",
    "Memo",
    "Resolved",
    "Stale",
    "TopologyResolver",
]
