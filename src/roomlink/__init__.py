"""roomlink - find speakers on the local network and control their groups."""

from __future__ import annotations

from importlib.metadata import version

from .config import DeviceConfig, DiscoveryConfig, Settings, get_settings
from .core import Controller, ControllerDirectory, DeviceRegistry, DiscoveryEngine
from .errors import (
    NotFoundOnNetwork,
    RoomlinkError,
    TopologyConsistencyFault,
    UnknownDeviceError,
    UnreachableDevice,
)
from .models import DeviceRecord, Group, TopologyEntry
from .network import create_directory
from .storage import FileAddressCache, MemoryAddressCache

__all__ = [
    "Controller",
    "ControllerDirectory",
    "DeviceConfig",
    "DeviceRecord",
    "DeviceRegistry",
    "DiscoveryConfig",
    "DiscoveryEngine",
    "FileAddressCache",
    "Group",
    "MemoryAddressCache",
    "NotFoundOnNetwork",
    "RoomlinkError",
    "Settings",
    "TopologyConsistencyFault",
    "TopologyEntry",
    "UnknownDeviceError",
    "UnreachableDevice",
    "__version__",
    "create_directory",
    "get_settings",
]

__version__ = version("roomlink")
