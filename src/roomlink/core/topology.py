"""Group topology: which devices follow which coordinator."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from xml.etree import ElementTree

import httpx

from roomlink.config import DeviceConfig
from roomlink.errors import (
    MalformedResponse,
    NotFoundOnNetwork,
    TopologyConsistencyFault,
    UnreachableDevice,
)
from roomlink.models import DeviceRecord, Group, Topology, TopologyEntry

from .discovery import address_from_location
from .state import Memo

logger = logging.getLogger(__name__)

TOPOLOGY_PATH = "/status/topology"


def _entry_from_element(element: ElementTree.Element) -> TopologyEntry:
    attributes = element.attrib
    location = attributes.get("location")
    if not location:
        raise MalformedResponse("ZonePlayer without a location attribute")
    address = address_from_location(location)
    uuid = attributes.get("uuid", "")
    room = (element.text or "").strip() or attributes.get("name", "")

    group = attributes.get("group", "").strip()
    if not group:
        # an ungrouped device leads a group of its own
        return TopologyEntry(
            address=address,
            group=uuid or address,
            coordinator=True,
            room=room,
            uuid=uuid,
        )

    return TopologyEntry(
        address=address,
        group=group,
        coordinator=attributes.get("coordinator", "").lower() == "true",
        room=room,
        uuid=uuid,
    )


def parse_topology(xml_text: str) -> dict[str, TopologyEntry]:
    """Parse a ``/status/topology`` document into entries keyed by address.

    Players that cannot be parsed are skipped; an unparseable document
    yields no entries.
    """
    try:
        root = ElementTree.fromstring(xml_text)
    except ElementTree.ParseError as exc:
        logger.warning("Could not parse topology document: %s", exc)
        return {}

    entries: dict[str, TopologyEntry] = {}
    for element in root.iter("ZonePlayer"):
        try:
            entry = _entry_from_element(element)
        except MalformedResponse as exc:
            logger.debug("Skipping topology record: %s", exc)
            continue
        entries[entry.address] = entry
    return entries


def build_groups(entries: Sequence[TopologyEntry]) -> tuple[Group, ...]:
    by_group: dict[str, list[TopologyEntry]] = {}
    for entry in entries:
        by_group.setdefault(entry.group, []).append(entry)

    groups = []
    for group_id, members in by_group.items():
        coordinators = [member for member in members if member.coordinator]
        if len(coordinators) != 1:
            raise TopologyConsistencyFault(
                f"Group {group_id} has {len(coordinators)} coordinators, expected 1"
            )
        groups.append(
            Group(
                group_id=group_id,
                coordinator=coordinators[0],
                members=tuple(members),
            )
        )
    return tuple(groups)


class TopologyResolver:
    """Fetches group state from one device and derives the group graph.

    The graph is rebuilt from scratch on every resolution and kept until
    ``clear_topology`` is called.
    """

    def __init__(
        self, client: httpx.Client, devices: DeviceConfig | None = None
    ) -> None:
        self._client = client
        self._config = devices or DeviceConfig()
        self._topology: Memo[Topology] = Memo()

    @property
    def resolved(self) -> bool:
        return self._topology.resolved

    def current(self) -> Topology | None:
        return self._topology.peek()

    def clear_topology(self) -> None:
        self._topology.invalidate()

    def fetch(self, address: str) -> str:
        url = f"http://{address}:{self._config.port}{TOPOLOGY_PATH}"
        logger.info("Getting topology info from %s", url)
        try:
            response = self._client.get(url, timeout=self._config.timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise UnreachableDevice(address, str(exc)) from exc
        return response.text

    def resolve_topology(
        self,
        devices: Sequence[DeviceRecord],
        source: DeviceRecord | None = None,
    ) -> Topology:
        eligible = [device for device in devices if device.eligible]
        if not eligible:
            raise NotFoundOnNetwork("No playback capable devices to resolve")

        source = source or eligible[0]
        fetched = parse_topology(self.fetch(source.address))

        missing = [
            device.address for device in eligible if device.address not in fetched
        ]
        if missing:
            raise TopologyConsistencyFault(
                "Failed to look up the topology for "
                f"{', '.join(missing)} (source {source.address})"
            )

        wanted = {device.address for device in eligible}
        placed = [entry for address, entry in fetched.items() if address in wanted]
        topology = Topology(groups=build_groups(placed))
        logger.debug("Resolved %d group(s) from %s", len(topology), source.address)
        return self._topology.set(topology)
