"""Exceptions raised by roomlink."""

from __future__ import annotations


class RoomlinkError(Exception):
    """Base class for every error raised by this package."""


class NotFoundOnNetwork(RoomlinkError):
    """Discovery produced no device that can play audio."""


class TopologyConsistencyFault(RoomlinkError):
    """The fetched group topology cannot be trusted.

    Raised when a group does not have exactly one coordinator, or when a
    device known from discovery is missing from the topology.
    """


class UnreachableDevice(RoomlinkError):
    def __init__(self, address: str, reason: str = "") -> None:
        self.address = address
        self.reason = reason
        message = f"Device at {address} is unreachable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedResponse(RoomlinkError):
    """A discovery or topology record could not be parsed."""


class CacheUnavailable(RoomlinkError):
    """The address cache could not be read or written."""


class UnknownDeviceError(RoomlinkError, LookupError):
    """No device is known under the requested address."""


class ActionFault(RoomlinkError):
    def __init__(
        self,
        service: str,
        action: str,
        detail: str,
        error_code: str | None = None,
    ) -> None:
        self.service = service
        self.action = action
        self.detail = detail
        self.error_code = error_code
        super().__init__(f"{service}.{action} failed: {detail}")
