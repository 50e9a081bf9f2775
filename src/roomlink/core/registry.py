from __future__ import annotations

import logging
from xml.etree import ElementTree

import httpx

from roomlink.config import DeviceConfig, DiscoveryConfig
from roomlink.errors import CacheUnavailable, MalformedResponse
from roomlink.models import DeviceRecord
from roomlink.storage import AddressCache

from .discovery import ADDRESS_CACHE_KEY, DiscoveryEngine
from .state import Memo

logger = logging.getLogger(__name__)

DESCRIPTION_PATH = "/xml/device_description.xml"

# Bridges and boosts join the mesh but cannot play audio
ADMINISTRATIVE_MODELS = frozenset({"ZB100", "BR100", "BR200"})


def parse_description(address: str, xml_text: str) -> DeviceRecord:
    try:
        root = ElementTree.fromstring(xml_text)
    except ElementTree.ParseError as exc:
        raise MalformedResponse(f"Bad device description from {address}") from exc

    def _text(tag: str) -> str:
        return (root.findtext(f".//{{*}}{tag}") or "").strip()

    model = _text("modelNumber")
    return DeviceRecord(
        address=address,
        playback_capable=model.upper() not in ADMINISTRATIVE_MODELS,
        model=model,
        model_name=_text("modelName"),
        room=_text("roomName"),
        udn=_text("UDN"),
    )


class DeviceRegistry:
    """Turns known addresses into device records.

    Addresses come from memory, then the address cache, then a discovery
    run, in that order.
    """

    def __init__(
        self,
        engine: DiscoveryEngine,
        cache: AddressCache,
        client: httpx.Client,
        discovery: DiscoveryConfig | None = None,
        devices: DeviceConfig | None = None,
    ) -> None:
        self._engine = engine
        self._cache = cache
        self._client = client
        self._discovery = discovery or DiscoveryConfig()
        self._device_config = devices or DeviceConfig()
        self._addresses: set[str] = set()
        self._force_discovery = False
        self._devices: Memo[list[DeviceRecord]] = Memo()

    def addresses(self) -> set[str]:
        if self._force_discovery:
            self._force_discovery = False
            self._addresses = self.discover() | self._addresses
        elif not self._addresses:
            cached = self._cached_addresses()
            if cached:
                logger.info("Using %d cached device address(es)", len(cached))
                self._addresses = cached
            else:
                self._addresses = self.discover()
        return set(self._addresses)

    def discover(self) -> set[str]:
        config = self._discovery
        return self._engine.discover(
            config.multicast_address,
            config.timeout,
            network_interface=config.network_interface,
            port=config.port,
            mx=config.mx,
            ttl=config.ttl,
        )

    def _cached_addresses(self) -> set[str] | None:
        try:
            return self._cache.get(ADDRESS_CACHE_KEY)
        except CacheUnavailable as exc:
            logger.warning("Address cache unavailable, discovering instead: %s", exc)
            return None

    def add_address(self, address: str) -> None:
        if not self._addresses and not self._force_discovery:
            self._addresses = self._cached_addresses() or set()
        if address in self._addresses:
            return
        self._addresses.add(address)
        self._devices.invalidate()
        try:
            known = self._cache.get(ADDRESS_CACHE_KEY) or set()
            self._cache.put(ADDRESS_CACHE_KEY, known | self._addresses)
        except CacheUnavailable as exc:
            logger.warning("Could not cache %s: %s", address, exc)

    def clear(self) -> None:
        self._addresses = set()
        self._devices.invalidate()

    def refresh(self) -> None:
        """Forget known addresses and rediscover next time, skipping the cache."""
        self.clear()
        self._force_discovery = True

    def probe(self, address: str) -> DeviceRecord:
        url = f"http://{address}:{self._device_config.port}{DESCRIPTION_PATH}"
        try:
            response = self._client.get(url, timeout=self._device_config.timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Device %s did not answer: %s", address, exc)
            return DeviceRecord(address=address, reachable=False)

        try:
            return parse_description(address, response.text)
        except MalformedResponse as exc:
            logger.warning("%s", exc)
            return DeviceRecord(address=address, reachable=False)

    def resolve(self, addresses: set[str] | list[str]) -> list[DeviceRecord]:
        records = [self.probe(address) for address in sorted(addresses)]
        logger.debug(
            "Resolved %d device(s), %d can play audio",
            len(records),
            sum(record.eligible for record in records),
        )
        return records

    def devices(self) -> list[DeviceRecord]:
        return self._devices.get(lambda: self.resolve(self.addresses()))

    def list_playback_capable(self) -> list[DeviceRecord]:
        return [record for record in self.devices() if record.eligible]

    @property
    def is_empty(self) -> bool:
        """True when the device list has been resolved and holds nothing usable."""
        devices = self._devices.peek()
        return devices is not None and not any(record.eligible for record in devices)
