from __future__ import annotations

import pytest
from fakes import FakeSocket
from typer.testing import CliRunner

import roomlink.cli.commands.discover as discover_cmd
import roomlink.cli.common as common
import roomlink.network as wiring
from roomlink import __version__
from roomlink.cli import app
from roomlink.config import CacheConfig, Settings, write_settings
from roomlink.core import ADDRESS_CACHE_KEY, DiscoveryEngine
from roomlink.errors import NotFoundOnNetwork
from roomlink.storage import FileAddressCache

runner = CliRunner()


def _use_config(tmp_path, monkeypatch) -> Settings:
    settings = Settings(cache=CacheConfig(path=str(tmp_path / "data")))
    config_path = tmp_path / "config.toml"
    write_settings(settings, config_path)
    monkeypatch.setenv("ROOMLINK_CONFIG", str(config_path))
    return settings


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"roomlink version {__version__}" in result.stdout


def test_config_show(tmp_path, monkeypatch):
    _use_config(tmp_path, monkeypatch)

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    assert "[discovery]" in result.stdout


def test_cache_show_and_clear(tmp_path, monkeypatch):
    _use_config(tmp_path, monkeypatch)
    cache = FileAddressCache(tmp_path / "data")
    cache.put(ADDRESS_CACHE_KEY, {"10.0.0.5"})

    shown = runner.invoke(app, ["cache", "show"])
    assert shown.exit_code == 0
    assert "10.0.0.5" in shown.stdout

    cleared = runner.invoke(app, ["cache", "clear"])
    assert cleared.exit_code == 0
    assert cache.get(ADDRESS_CACHE_KEY) is None


def test_discover_lists_addresses(tmp_path, monkeypatch):
    _use_config(tmp_path, monkeypatch)

    class FakeEngine:
        def __init__(self, cache):
            pass

        def discover(self, *args, **kwargs):
            return {"10.0.0.5", "10.0.0.6"}

    monkeypatch.setattr(discover_cmd, "DiscoveryEngine", FakeEngine)

    result = runner.invoke(app, ["discover"])

    assert result.exit_code == 0
    assert "10.0.0.6" in result.stdout
    assert "Found 2 device(s)" in result.stdout


def test_groups_reports_errors(tmp_path, monkeypatch):
    _use_config(tmp_path, monkeypatch)

    class EmptyDirectory:
        def controllers(self):
            raise NotFoundOnNetwork("No devices found on the current network")

    monkeypatch.setattr(
        common, "create_directory", lambda settings, client=None: EmptyDirectory()
    )

    result = runner.invoke(app, ["groups"])

    assert result.exit_code == 1


class UnroutedSocket(FakeSocket):
    def sendto(self, data, address):
        raise OSError(101, "Network is unreachable")


@pytest.mark.parametrize("command", ["devices", "groups"])
def test_commands_report_socket_errors_during_discovery(
    tmp_path, monkeypatch, command
):
    _use_config(tmp_path, monkeypatch)
    monkeypatch.setattr(
        wiring,
        "DiscoveryEngine",
        lambda cache: DiscoveryEngine(cache, socket_factory=UnroutedSocket),
    )

    result = runner.invoke(app, [command])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "Network is unreachable" in result.output


def test_config_init_writes_interface(tmp_path, monkeypatch):
    config_path = tmp_path / "config.toml"
    monkeypatch.setenv("ROOMLINK_CONFIG", str(config_path))

    result = runner.invoke(app, ["config", "init", "--interface", "192.168.1.20"])

    assert result.exit_code == 0
    assert 'network_interface = "192.168.1.20"' in config_path.read_text()

    again = runner.invoke(app, ["config", "init"])
    assert again.exit_code == 0
    assert "Config exists" in again.stdout


def test_config_init_rejects_bad_interface(tmp_path, monkeypatch):
    monkeypatch.setenv("ROOMLINK_CONFIG", str(tmp_path / "config.toml"))

    result = runner.invoke(app, ["config", "init", "--interface", "eth0"])

    assert result.exit_code == 1
    assert not (tmp_path / "config.toml").exists()


def test_open_directory_closes_its_http_client(monkeypatch):
    clients = []

    def fake_create_directory(settings, client=None):
        clients.append(client)
        return object()

    monkeypatch.setattr(common, "create_directory", fake_create_directory)

    with common.open_directory(Settings()):
        assert not clients[0].is_closed

    assert clients[0].is_closed
