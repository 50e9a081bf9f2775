"""Data models for roomlink."""

from roomlink.models.content import Favourite, Playlist
from roomlink.models.device import AddressCacheFile, DeviceRecord
from roomlink.models.topology import Group, Topology, TopologyEntry

__all__ = [
    "AddressCacheFile",
    "DeviceRecord",
    "Favourite",
    "Group",
    "Playlist",
    "Topology",
    "TopologyEntry",
]
