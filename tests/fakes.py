from __future__ import annotations

import httpx

ZONE_PLAYER_ST = "urn:schemas-upnp-org:device:ZonePlayer:1"

DESCRIPTION_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
  <device>
    <deviceType>urn:schemas-upnp-org:device:ZonePlayer:1</deviceType>
    <roomName>{room}</roomName>
    <modelNumber>{model}</modelNumber>
    <modelName>Sonos {model}</modelName>
    <UDN>uuid:{uuid}</UDN>
  </device>
</root>
"""


def description(room: str, model: str = "S12", uuid: str = "RINCON_X") -> str:
    return DESCRIPTION_TEMPLATE.format(room=room, model=model, uuid=uuid)


def player(
    ip: str, room: str, group: str, coordinator: bool, uuid: str = ""
) -> dict[str, str]:
    return {
        "group": group,
        "coordinator": "true" if coordinator else "false",
        "uuid": uuid or f"RINCON_{ip.replace('.', '')}",
        "location": f"http://{ip}:1400/xml/device_description.xml",
        "room": room,
    }


def topology_xml(*players: dict[str, str]) -> str:
    rows = []
    for attributes in players:
        attributes = dict(attributes)
        room = attributes.pop("room", "")
        rendered = " ".join(f'{key}="{value}"' for key, value in attributes.items())
        rows.append(f"<ZonePlayer {rendered}>{room}</ZonePlayer>")
    return (
        '<?xml version="1.0" ?><ZPSupportInfo><ZonePlayers>'
        + "".join(rows)
        + "</ZonePlayers></ZPSupportInfo>"
    )


def ssdp_response(usn: str, location: str, st: str = ZONE_PLAYER_ST) -> bytes:
    return (
        "HTTP/1.1 200 OK\r\n"
        "CACHE-CONTROL: max-age = 1800\r\n"
        "EXT:\r\n"
        f"LOCATION: {location}\r\n"
        "SERVER: Linux UPnP/1.0 Sonos/70.3\r\n"
        f"ST: {st}\r\n"
        f"USN: {usn}\r\n"
        "\r\n"
    ).encode()


class FakeNetwork:
    """Routes httpx requests to canned responses keyed by host and path."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, str] | None] = {}
        self.requests: list[httpx.Request] = []

    def add(self, host: str, path: str, body: str, status: int = 200) -> None:
        self.routes[(host, path)] = (status, body)

    def fail(self, host: str, path: str) -> None:
        self.routes[(host, path)] = None

    def add_speaker(self, ip: str, room: str, model: str = "S12") -> None:
        self.add(ip, "/xml/device_description.xml", description(room, model))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.url.host, request.url.path))
        if route is None:
            raise httpx.ConnectError("connection refused", request=request)
        status, body = route
        return httpx.Response(status, text=body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def count(self, path: str) -> int:
        return sum(1 for request in self.requests if request.url.path == path)


class FakeSocket:
    """Stands in for a UDP socket: hands out queued datagrams, then times out."""

    def __init__(self, datagrams: list[bytes] | None = None) -> None:
        self.datagrams = list(datagrams or [])
        self.options: list[tuple[int, int, object]] = []
        self.sent: list[tuple[bytes, tuple[str, int]]] = []
        self.timeouts: list[float] = []
        self.closed = False

    def __enter__(self) -> FakeSocket:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True

    def setsockopt(self, level: int, option: int, value: object) -> None:
        self.options.append((level, option, value))

    def sendto(self, data: bytes, address: tuple[str, int]) -> int:
        self.sent.append((data, address))
        return len(data)

    def settimeout(self, value: float) -> None:
        self.timeouts.append(value)

    def recvfrom(self, _size: int) -> tuple[bytes, tuple[str, int]]:
        if not self.datagrams:
            raise TimeoutError("timed out")
        return self.datagrams.pop(0), ("10.0.0.99", 1900)
