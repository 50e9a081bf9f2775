from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from pydantic import BaseModel


class TopologyEntry(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    address: str
    group: str
    coordinator: bool
    room: str
    uuid: str = ""


@dataclass(frozen=True)
class Group:
    """Devices playing in sync, led by exactly one coordinator."""

    group_id: str
    coordinator: TopologyEntry
    members: tuple[TopologyEntry, ...]

    @property
    def addresses(self) -> list[str]:
        return [member.address for member in self.members]

    def __contains__(self, address: object) -> bool:
        return address in self.addresses


@dataclass(frozen=True)
class Topology:
    groups: tuple[Group, ...]
    _by_address: dict[str, TopologyEntry] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        entries = {
            member.address: member for group in self.groups for member in group.members
        }
        object.__setattr__(self, "_by_address", entries)

    def __iter__(self) -> Iterator[Group]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    def entries(self) -> list[TopologyEntry]:
        return list(self._by_address.values())

    def entry_for(self, address: str) -> TopologyEntry | None:
        return self._by_address.get(address)

    def group_for(self, group_id: str) -> Group | None:
        for group in self.groups:
            if group.group_id == group_id:
                return group
        return None
