from __future__ import annotations

import ipaddress
import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from .paths import default_config_path, default_data_dir, expand_path

CONFIG_ENV_VAR = "ROOMLINK_CONFIG"

SSDP_MULTICAST_ADDRESS = "239.255.255.250"
SSDP_PORT = 1900
DEVICE_HTTP_PORT = 1400


class DiscoveryConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    multicast_address: str = SSDP_MULTICAST_ADDRESS
    port: int = Field(default=SSDP_PORT, ge=1, le=65535)
    timeout: float = Field(default=1.0, gt=0)
    mx: int = Field(default=1, ge=1, le=5)
    ttl: int = Field(default=2, ge=1, le=255)
    network_interface: str | None = None

    @field_validator("multicast_address")
    @classmethod
    def _check_multicast(cls, value: str) -> str:
        if not ipaddress.IPv4Address(value).is_multicast:
            raise ValueError(f"{value} is not an IPv4 multicast address")
        return value

    @field_validator("network_interface")
    @classmethod
    def _check_interface(cls, value: str | None) -> str | None:
        if value is None:
            return None
        # IP_MULTICAST_IF takes the address of a local interface
        return str(ipaddress.IPv4Address(value))


class DeviceConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    port: int = Field(default=DEVICE_HTTP_PORT, ge=1, le=65535)
    timeout: float = Field(default=5.0, gt=0)


class CacheConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    path: str = Field(default_factory=lambda: str(default_data_dir()))


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    cache: CacheConfig = Field(default_factory=CacheConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    devices: DeviceConfig = Field(default_factory=DeviceConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def data_dir_from_settings(settings: Settings) -> Path:
    return expand_path(settings.cache.path)


def _toml_string(value: str) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    discovery = settings.discovery
    lines = [
        "# roomlink configuration",
        "",
        "[cache]",
        f"path = {_toml_string(settings.cache.path)}",
        "",
        "[discovery]",
        f"multicast_address = {_toml_string(discovery.multicast_address)}",
        f"port = {discovery.port}",
        f"timeout = {discovery.timeout}",
        f"mx = {discovery.mx}",
        f"ttl = {discovery.ttl}",
    ]
    if discovery.network_interface is not None:
        lines.append(
            f"network_interface = {_toml_string(discovery.network_interface)}"
        )
    lines += [
        "",
        "[devices]",
        f"port = {settings.devices.port}",
        f"timeout = {settings.devices.timeout}",
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
