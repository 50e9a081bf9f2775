"""UPnP action invocation over SOAP."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol
from xml.etree import ElementTree
from xml.sax.saxutils import escape as xml_escape

import httpx

from roomlink.config import DEVICE_HTTP_PORT
from roomlink.errors import ActionFault, UnreachableDevice

logger = logging.getLogger(__name__)

CONTROL_PATHS = {
    "AlarmClock": "/AlarmClock/Control",
    "AVTransport": "/MediaRenderer/AVTransport/Control",
    "ContentDirectory": "/MediaServer/ContentDirectory/Control",
    "DeviceProperties": "/DeviceProperties/Control",
    "GroupRenderingControl": "/MediaRenderer/GroupRenderingControl/Control",
    "RenderingControl": "/MediaRenderer/RenderingControl/Control",
    "ZoneGroupTopology": "/ZoneGroupTopology/Control",
}


class ActionInvoker(Protocol):
    def invoke(
        self, service: str, action: str, arguments: Mapping[str, Any] | None = None
    ) -> dict[str, str]: ...


def _service_namespace(service: str) -> str:
    return f"urn:schemas-upnp-org:service:{service}:1"


def build_envelope(service: str, action: str, arguments: Mapping[str, Any]) -> str:
    body = "".join(
        f"<{name}>{xml_escape(str(value))}</{name}>"
        for name, value in arguments.items()
    )
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" '
        's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">'
        "<s:Body>"
        f'<u:{action} xmlns:u="{_service_namespace(service)}">'
        f"{body}"
        f"</u:{action}>"
        "</s:Body>"
        "</s:Envelope>"
    )


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_fault(root: ElementTree.Element) -> tuple[str, str | None] | None:
    if root.find(".//{*}Fault") is None:
        return None
    code = (root.findtext(".//{*}errorCode") or "").strip() or None
    description = (root.findtext(".//{*}errorDescription") or "").strip()
    fault_string = (root.findtext(".//{*}faultstring") or "").strip()
    detail = description or fault_string or "unknown SOAP fault"
    if code:
        detail = f"UPnPError {code}: {detail}"
    return detail, code


def parse_action_response(action: str, root: ElementTree.Element) -> dict[str, str]:
    for element in root.iter():
        if _local_name(element.tag) == f"{action}Response":
            return {_local_name(child.tag): child.text or "" for child in element}
    return {}


class SoapActionInvoker:
    """Sends UPnP actions to one device."""

    def __init__(
        self,
        address: str,
        client: httpx.Client,
        port: int = DEVICE_HTTP_PORT,
        timeout: float = 5.0,
    ) -> None:
        self.address = address
        self._client = client
        self._port = port
        self._timeout = timeout

    def invoke(
        self, service: str, action: str, arguments: Mapping[str, Any] | None = None
    ) -> dict[str, str]:
        path = CONTROL_PATHS.get(service)
        if path is None:
            raise ValueError(f"Unknown UPnP service {service!r}")

        url = f"http://{self.address}:{self._port}{path}"
        headers = {
            "Content-Type": 'text/xml; charset="utf-8"',
            "SOAPACTION": f'"{_service_namespace(service)}#{action}"',
        }
        envelope = build_envelope(service, action, arguments or {})
        logger.debug("Invoking %s.%s on %s", service, action, self.address)

        try:
            response = self._client.post(
                url,
                content=envelope.encode("utf-8"),
                headers=headers,
                timeout=self._timeout,
            )
        except httpx.TransportError as exc:
            raise UnreachableDevice(self.address, str(exc)) from exc

        try:
            root = ElementTree.fromstring(response.text)
        except ElementTree.ParseError as exc:
            raise ActionFault(
                service, action, f"HTTP {response.status_code}, unparseable body"
            ) from exc

        fault = parse_fault(root)
        if fault is not None:
            detail, code = fault
            raise ActionFault(service, action, detail, error_code=code)
        if response.status_code >= 400:
            raise ActionFault(service, action, f"HTTP {response.status_code}")

        return parse_action_response(action, root)
