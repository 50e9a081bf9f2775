from __future__ import annotations

import pytest
from fakes import player, topology_xml

from roomlink.core import TopologyResolver
from roomlink.core.topology import build_groups, parse_topology
from roomlink.errors import (
    NotFoundOnNetwork,
    TopologyConsistencyFault,
    UnreachableDevice,
)
from roomlink.models import DeviceRecord, TopologyEntry


def _devices(*addresses: str) -> list[DeviceRecord]:
    return [DeviceRecord(address=address) for address in addresses]


def test_two_members_one_group(network):
    network.add(
        "10.0.0.5",
        "/status/topology",
        topology_xml(
            player("10.0.0.5", "Living Room", "G1", True),
            player("10.0.0.6", "Kitchen", "G1", False),
        ),
    )
    resolver = TopologyResolver(network.client())

    topology = resolver.resolve_topology(_devices("10.0.0.5", "10.0.0.6"))

    assert len(topology) == 1
    group = topology.groups[0]
    assert group.group_id == "G1"
    assert group.coordinator.address == "10.0.0.5"
    assert sorted(group.addresses) == ["10.0.0.5", "10.0.0.6"]
    assert topology.entry_for("10.0.0.6").room == "Kitchen"
    assert resolver.resolved


def test_missing_device_raises_consistency_fault(network):
    network.add(
        "10.0.0.5",
        "/status/topology",
        topology_xml(player("10.0.0.5", "Living Room", "G1", True)),
    )
    resolver = TopologyResolver(network.client())

    with pytest.raises(TopologyConsistencyFault, match="10.0.0.6"):
        resolver.resolve_topology(_devices("10.0.0.5", "10.0.0.6"))
    assert not resolver.resolved


def test_group_without_coordinator_is_a_fault(network):
    network.add(
        "10.0.0.5",
        "/status/topology",
        topology_xml(
            player("10.0.0.5", "Living Room", "G1", False),
            player("10.0.0.6", "Kitchen", "G1", False),
        ),
    )

    with pytest.raises(TopologyConsistencyFault, match="0 coordinators"):
        TopologyResolver(network.client()).resolve_topology(
            _devices("10.0.0.5", "10.0.0.6")
        )


def test_group_with_two_coordinators_is_a_fault():
    entries = [
        TopologyEntry(address="10.0.0.5", group="G1", coordinator=True, room="A"),
        TopologyEntry(address="10.0.0.6", group="G1", coordinator=True, room="B"),
    ]

    with pytest.raises(TopologyConsistencyFault, match="2 coordinators"):
        build_groups(entries)


def test_every_group_has_exactly_one_coordinator(network):
    network.add(
        "10.0.0.5",
        "/status/topology",
        topology_xml(
            player("10.0.0.5", "Living Room", "G1", True),
            player("10.0.0.6", "Kitchen", "G1", False),
            player("10.0.0.7", "Office", "G2", True),
            player("10.0.0.8", "Bedroom", "G3", True),
            player("10.0.0.9", "Bathroom", "G3", False),
        ),
    )
    topology = TopologyResolver(network.client()).resolve_topology(
        _devices("10.0.0.5", "10.0.0.6", "10.0.0.7", "10.0.0.8", "10.0.0.9")
    )

    assert len(topology) == 3
    for group in topology:
        assert sum(member.coordinator for member in group.members) == 1


def test_ungrouped_device_is_its_own_coordinator():
    entries = parse_topology(
        topology_xml(
            {
                "uuid": "RINCON_SOLO",
                "location": "http://10.0.0.7:1400/xml/device_description.xml",
                "room": "Office",
            }
        )
    )

    entry = entries["10.0.0.7"]
    assert entry.coordinator is True
    assert entry.group == "RINCON_SOLO"
    assert entry.room == "Office"


def test_records_without_location_are_skipped():
    entries = parse_topology(
        topology_xml(
            {"group": "G1", "coordinator": "true", "room": "Ghost"},
            player("10.0.0.5", "Living Room", "G1", True),
        )
    )

    assert list(entries) == ["10.0.0.5"]


def test_unparseable_document_yields_no_entries():
    assert parse_topology("<ZPSupportInfo>") == {}


def test_devices_outside_the_discovered_set_are_ignored(network):
    network.add(
        "10.0.0.5",
        "/status/topology",
        topology_xml(
            player("10.0.0.5", "Living Room", "G1", True),
            player("10.0.0.9", "BRIDGE", "G9", True),
        ),
    )
    topology = TopologyResolver(network.client()).resolve_topology(
        _devices("10.0.0.5")
    )

    assert [entry.address for entry in topology.entries()] == ["10.0.0.5"]


def test_unreachable_source_raises(network):
    network.fail("10.0.0.5", "/status/topology")

    with pytest.raises(UnreachableDevice) as excinfo:
        TopologyResolver(network.client()).resolve_topology(_devices("10.0.0.5"))
    assert excinfo.value.address == "10.0.0.5"


def test_explicit_source_is_used(network):
    network.fail("10.0.0.5", "/status/topology")
    network.add(
        "10.0.0.6",
        "/status/topology",
        topology_xml(
            player("10.0.0.5", "Living Room", "G1", True),
            player("10.0.0.6", "Kitchen", "G1", False),
        ),
    )
    devices = _devices("10.0.0.5", "10.0.0.6")

    topology = TopologyResolver(network.client()).resolve_topology(
        devices, source=devices[1]
    )

    assert topology.group_for("G1") is not None


def test_only_eligible_devices_are_considered(network):
    with pytest.raises(NotFoundOnNetwork):
        TopologyResolver(network.client()).resolve_topology(
            [DeviceRecord(address="10.0.0.5", reachable=False)]
        )


def test_clear_topology_returns_to_unresolved(network):
    network.add(
        "10.0.0.5",
        "/status/topology",
        topology_xml(player("10.0.0.5", "Living Room", "G1", True)),
    )
    resolver = TopologyResolver(network.client())
    resolver.resolve_topology(_devices("10.0.0.5"))

    resolver.clear_topology()

    assert not resolver.resolved
    assert resolver.current() is None
