from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeviceRecord(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    address: str
    playback_capable: bool = True
    reachable: bool = True
    discovered_at: datetime = Field(default_factory=_utcnow)
    model: str = ""
    model_name: str = ""
    room: str = ""
    udn: str = ""

    @property
    def eligible(self) -> bool:
        """True when the device answered and can play audio."""
        return self.reachable and self.playback_capable


class AddressCacheFile(BaseModel):
    """On-disk layout of the file backed address cache."""

    model_config = {"extra": "forbid"}

    entries: dict[str, list[str]] = Field(default_factory=dict)
