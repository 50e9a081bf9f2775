from __future__ import annotations

import pytest
from fakes import FakeNetwork

from roomlink.config import get_settings
from roomlink.storage import MemoryAddressCache


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("ROOMLINK_CONFIG", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture
def cache() -> MemoryAddressCache:
    return MemoryAddressCache()
