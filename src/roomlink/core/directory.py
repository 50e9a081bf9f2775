"""Coordinator handles keyed by room, address or group."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from roomlink.content import Radio, list_playlists
from roomlink.errors import NotFoundOnNetwork, UnknownDeviceError
from roomlink.models import Group, Playlist, Topology, TopologyEntry
from roomlink.soap import ActionInvoker
from roomlink.utils.lookup import rough_match

from .registry import DeviceRegistry
from .state import Memo
from .topology import TopologyResolver

logger = logging.getLogger(__name__)

InvokerFactory = Callable[[str], ActionInvoker]


class Controller:
    """Handle to the coordinator of one group.

    Commands sent through ``soap`` always go to the coordinator, so they
    apply to the whole group.
    """

    def __init__(self, group: Group, invoker: ActionInvoker) -> None:
        self._group = group
        self._invoker = invoker

    @property
    def address(self) -> str:
        return self._group.coordinator.address

    @property
    def room(self) -> str:
        return self._group.coordinator.room

    @property
    def uuid(self) -> str:
        return self._group.coordinator.uuid

    @property
    def group(self) -> str:
        return self._group.group_id

    @property
    def members(self) -> list[TopologyEntry]:
        return list(self._group.members)

    def is_coordinator(self) -> bool:
        return self._group.coordinator.coordinator

    def soap(
        self, service: str, action: str, arguments: Mapping[str, Any] | None = None
    ) -> dict[str, str]:
        return self._invoker.invoke(service, action, arguments or {})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Controller):
            return NotImplemented
        return (self.group, self.address) == (other.group, other.address)

    def __hash__(self) -> int:
        return hash((self.group, self.address))

    def __repr__(self) -> str:
        return (
            f"Controller(room={self.room!r}, address={self.address!r}, "
            f"group={self.group!r})"
        )


class ControllerDirectory:
    def __init__(
        self,
        registry: DeviceRegistry,
        resolver: TopologyResolver,
        invoker_factory: InvokerFactory,
    ) -> None:
        self._registry = registry
        self._resolver = resolver
        self._invoker_factory = invoker_factory
        self._controllers: Memo[tuple[Topology, list[Controller]]] = Memo()
        self._playlists: Memo[list[Playlist]] = Memo()

    @property
    def registry(self) -> DeviceRegistry:
        return self._registry

    def topology(self) -> Topology:
        current = self._resolver.current()
        if current is not None:
            return current

        devices = self._registry.list_playback_capable()
        if not devices:
            raise NotFoundOnNetwork("No devices found on the current network")

        logger.info("Resolving topology for %d device(s)", len(devices))
        return self._resolver.resolve_topology(devices)

    def clear_topology(self) -> None:
        self._resolver.clear_topology()
        self._controllers.invalidate()
        if self._registry.is_empty:
            self._registry.refresh()

    def controllers(self) -> list[Controller]:
        topology = self.topology()
        built = self._controllers.peek()
        if built is None or built[0] is not topology:
            # one controller per group coordinator
            controllers = [
                Controller(group, self._invoker_factory(group.coordinator.address))
                for group in topology
            ]
            built = self._controllers.set((topology, controllers))
        return list(built[1])

    def controller(self) -> Controller:
        """Any controller, for operations that apply to the whole network."""
        return self.controllers()[0]

    def speakers(self) -> list[TopologyEntry]:
        return self.topology().entries()

    def speaker_by_room(self, room: str) -> TopologyEntry | None:
        return rough_match(self.speakers(), room, lambda entry: entry.room)

    def speakers_by_room(self, room: str) -> list[TopologyEntry]:
        return [entry for entry in self.speakers() if entry.room == room]

    def controller_by_group(self, group_id: str) -> Controller | None:
        for controller in self.controllers():
            if controller.group == group_id:
                return controller
        return None

    def controller_by_room(self, room: str) -> Controller | None:
        speaker = self.speaker_by_room(room)
        if speaker is None:
            return None
        return self.controller_by_group(speaker.group)

    def controller_by_address(self, address: str) -> Controller:
        entry = self.topology().entry_for(address)
        if entry is None:
            raise UnknownDeviceError(f"No speaker found for the IP address '{address}'")
        controller = self.controller_by_group(entry.group)
        if controller is None:
            raise UnknownDeviceError(f"No controller governs the group of '{address}'")
        return controller

    def playlists(self) -> list[Playlist]:
        return list(self._playlists.get(lambda: list_playlists(self.controller())))

    def playlist_by_name(self, name: str) -> Playlist | None:
        return rough_match(self.playlists(), name, lambda playlist: playlist.name)

    def has_playlist(self, name: str) -> bool:
        return self.playlist_by_name(name) is not None

    def clear_content(self) -> None:
        self._playlists.invalidate()

    def radio(self) -> Radio:
        return Radio(self.controller())
