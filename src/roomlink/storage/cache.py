"""Durable storage for device addresses found by discovery."""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from roomlink.errors import CacheUnavailable
from roomlink.models import AddressCacheFile

logger = logging.getLogger(__name__)

CACHE_DIR = "cache"
ADDRESSES_FILE = "addresses.json"


class AddressCache(ABC):
    """Key/value store mapping a cache key to a set of addresses.

    Entries are only ever removed by ``clear()``. Implementations raise
    ``CacheUnavailable`` when the backing store cannot be used; callers
    treat that as a cache miss.
    """

    @abstractmethod
    def get(self, key: str) -> set[str] | None: ...

    @abstractmethod
    def put(self, key: str, addresses: Iterable[str]) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...

    def contains(self, key: str) -> bool:
        return self.get(key) is not None

    def fetch(self, key: str) -> set[str]:
        addresses = self.get(key)
        if addresses is None:
            raise KeyError(key)
        return addresses

    def save(self, key: str, addresses: Iterable[str]) -> None:
        self.put(key, addresses)


class MemoryAddressCache(AddressCache):
    def __init__(self) -> None:
        self._entries: dict[str, frozenset[str]] = {}

    def get(self, key: str) -> set[str] | None:
        entry = self._entries.get(key)
        return None if entry is None else set(entry)

    def put(self, key: str, addresses: Iterable[str]) -> None:
        self._entries[key] = frozenset(addresses)

    def clear(self) -> None:
        self._entries.clear()


class FileAddressCache(AddressCache):
    """JSON document below the data directory, rewritten on every put."""

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._path = data_dir / CACHE_DIR / ADDRESSES_FILE

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> AddressCacheFile:
        if not self._path.exists():
            return AddressCacheFile()

        try:
            with self._path.open("r") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise CacheUnavailable(f"Cannot read {self._path}: {exc}") from exc

        try:
            return AddressCacheFile.model_validate(data)
        except ValidationError as exc:
            raise CacheUnavailable(f"Invalid cache file: {self._path}\n{exc}") from exc

    def _store(self, document: AddressCacheFile) -> None:
        tmp_path = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w") as handle:
                json.dump(document.model_dump(mode="json"), handle, indent=2)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise CacheUnavailable(f"Cannot write {self._path}: {exc}") from exc

    def get(self, key: str) -> set[str] | None:
        entry = self._load().entries.get(key)
        return None if entry is None else set(entry)

    def put(self, key: str, addresses: Iterable[str]) -> None:
        document = self._load()
        document.entries[key] = sorted(set(addresses))
        self._store(document)
        logger.debug("Cached %d address(es) under %s", len(document.entries[key]), key)

    def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as exc:
            raise CacheUnavailable(f"Cannot remove {self._path}: {exc}") from exc
