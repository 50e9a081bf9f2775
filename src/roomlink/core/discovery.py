"""SSDP discovery of speakers on the local network segment."""

from __future__ import annotations

import logging
import socket
import time
from collections.abc import Callable
from urllib.parse import urlparse

from roomlink.config import SSDP_MULTICAST_ADDRESS, SSDP_PORT
from roomlink.errors import CacheUnavailable, MalformedResponse
from roomlink.storage import AddressCache

logger = logging.getLogger(__name__)

ZONE_PLAYER_ST = "urn:schemas-upnp-org:device:ZonePlayer:1"
ADDRESS_CACHE_KEY = "device-addresses-v1"
DEFAULT_WINDOW = 1.0
RECV_BUFFER = 2048

SocketFactory = Callable[[], socket.socket]


def _udp_socket() -> socket.socket:
    return socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)


def build_probe(multicast_address: str, port: int, mx: int = 1) -> bytes:
    lines = [
        "M-SEARCH * HTTP/1.1",
        f"HOST: {multicast_address}:{port}",
        'MAN: "ssdp:discover"',
        f"MX: {mx}",
        f"ST: {ZONE_PLAYER_ST}",
        "",
        "",
    ]
    return "\r\n".join(lines).encode("ascii")


def parse_response_blocks(text: str) -> list[str]:
    normalized = text.replace("\r\n", "\n")
    return [block for block in normalized.split("\n\n") if block.strip()]


def parse_headers(block: str) -> dict[str, str]:
    headers: dict[str, str] = {}
    for line in block.splitlines():
        name, sep, value = line.partition(":")
        # the status line has no colon; a leading colon has no name
        if not sep or not name.strip():
            continue
        headers[name.strip().casefold()] = value.strip()
    if not headers:
        raise MalformedResponse(f"No headers in response block: {block[:60]!r}")
    return headers


def address_from_location(location: str) -> str:
    host = urlparse(location).hostname
    if not host:
        raise MalformedResponse(f"No host in location {location!r}")
    return host


class DiscoveryEngine:
    """Sends one M-SEARCH probe and collects the answers for a fixed window.

    Every new address is written through to the cache as soon as it is
    seen.
    """

    def __init__(
        self,
        cache: AddressCache,
        socket_factory: SocketFactory = _udp_socket,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache = cache
        self._socket_factory = socket_factory
        self._clock = clock

    def discover(
        self,
        multicast_address: str = SSDP_MULTICAST_ADDRESS,
        timeout: float = DEFAULT_WINDOW,
        network_interface: str | None = None,
        port: int = SSDP_PORT,
        mx: int = 1,
        ttl: int = 2,
    ) -> set[str]:
        logger.info("Discovering devices via %s:%d", multicast_address, port)
        datagrams = self._probe(
            multicast_address, port, timeout, network_interface, mx, ttl
        )
        logger.debug("Collected %d datagram(s)", len(datagrams))

        addresses: set[str] = set()
        seen_usns: set[str] = set()
        for datagram in datagrams:
            text = datagram.decode("utf-8", errors="replace")
            for block in parse_response_blocks(text):
                try:
                    headers = parse_headers(block)
                except MalformedResponse as exc:
                    logger.debug("Skipping response: %s", exc)
                    continue

                if headers.get("st") != ZONE_PLAYER_ST:
                    continue

                usn = headers.get("usn")
                location = headers.get("location")
                if not usn or not location:
                    logger.debug("Skipping response without USN or LOCATION")
                    continue
                # a later answer with the same USN is dropped even if its
                # LOCATION differs
                if usn in seen_usns:
                    continue

                try:
                    address = address_from_location(location)
                except MalformedResponse as exc:
                    logger.debug("Skipping response: %s", exc)
                    continue

                seen_usns.add(usn)
                logger.info("Found device %s at %s", usn, address)
                if address not in addresses:
                    addresses.add(address)
                    self._remember(address)

        return addresses

    def _probe(
        self,
        multicast_address: str,
        port: int,
        window: float,
        network_interface: str | None,
        mx: int,
        ttl: int,
    ) -> list[bytes]:
        probe = build_probe(multicast_address, port, mx)
        datagrams: list[bytes] = []

        with self._socket_factory() as sock:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, ttl)
            if network_interface is not None:
                sock.setsockopt(
                    socket.IPPROTO_IP,
                    socket.IP_MULTICAST_IF,
                    socket.inet_aton(network_interface),
                )
            logger.debug("Sending probe:\n%s", probe.decode("ascii"))
            sock.sendto(probe, (multicast_address, port))

            deadline = self._clock() + window
            while True:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    break
                sock.settimeout(remaining)
                try:
                    data, sender = sock.recvfrom(RECV_BUFFER)
                except TimeoutError:
                    break
                logger.debug("Datagram from %s (%d bytes)", sender[0], len(data))
                datagrams.append(data)

        return datagrams

    def _remember(self, address: str) -> None:
        try:
            known = self._cache.get(ADDRESS_CACHE_KEY) or set()
            if address not in known:
                self._cache.put(ADDRESS_CACHE_KEY, known | {address})
        except CacheUnavailable as exc:
            logger.warning("Could not cache %s: %s", address, exc)
