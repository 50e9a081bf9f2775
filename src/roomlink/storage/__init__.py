from __future__ import annotations

from .cache import AddressCache, FileAddressCache, MemoryAddressCache

__all__ = ["AddressCache", "FileAddressCache", "MemoryAddressCache"]
