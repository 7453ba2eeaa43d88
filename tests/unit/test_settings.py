"""Unit tests for ConnectivitySettings and known hosts loading."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from connectivity.config.known_hosts import DEFAULT_KNOWN_HOSTS, KnownHosts, load_known_hosts
from connectivity.config.settings import ConnectivitySettings


# ---------------------------------------------------------------------------
# ConnectivitySettings
# ---------------------------------------------------------------------------


class TestConnectivitySettings:
    def test_defaults_are_correct(self):
        settings = ConnectivitySettings()

        assert settings.port == 8002
        assert settings.log_level == "INFO"
        assert settings.deployed_url == "https://slugger-app-group6-qrpk.onrender.com/api"
        assert settings.api_host == "localhost"
        assert settings.api_port == 5001
        assert settings.api_path == "/api"
        assert settings.server_ip is None
        assert settings.platform == "native"
        assert settings.ping_timeout_seconds == 1.5
        assert settings.health_timeout_seconds == 5.0
        assert settings.scan_ports == [5000, 3000]
        assert settings.scan_enabled is False
        assert settings.known_hosts_path.endswith("known_hosts.yaml")

    def test_env_prefix_is_connectivity(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CONNECTIVITY_API_HOST", "192.168.1.20")
        monkeypatch.setenv("CONNECTIVITY_PLATFORM", "web")
        monkeypatch.setenv("CONNECTIVITY_SCAN_PORTS", "[8080]")

        settings = ConnectivitySettings()

        assert settings.api_host == "192.168.1.20"
        assert settings.platform == "web"
        assert settings.scan_ports == [8080]

    def test_rejects_unknown_platform(self):
        with pytest.raises(ValidationError):
            ConnectivitySettings(platform="desktop")

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            ConnectivitySettings(ping_timeout_seconds=0)

    def test_rejects_out_of_range_port(self):
        with pytest.raises(ValidationError):
            ConnectivitySettings(api_port=70000)


class TestDerivedValues:
    def test_configured_url_uses_api_host(self):
        settings = ConnectivitySettings(api_host="10.0.0.5", api_port=5001)
        assert settings.configured_url == "http://10.0.0.5:5001/api"

    def test_server_ip_overrides_api_host(self):
        settings = ConnectivitySettings(api_host="10.0.0.5", server_ip="192.168.1.20")
        assert settings.configured_url == "http://192.168.1.20:5001/api"

    def test_ports_to_try_puts_api_port_first(self):
        settings = ConnectivitySettings(api_port=3000, scan_ports=[5000, 3000, 8080])
        assert settings.ports_to_try == [3000, 5000, 8080]


# ---------------------------------------------------------------------------
# Known hosts
# ---------------------------------------------------------------------------


class TestLoadKnownHosts:
    def test_bundled_file_matches_defaults(self):
        loaded = load_known_hosts(ConnectivitySettings().known_hosts_path)
        assert loaded == DEFAULT_KNOWN_HOSTS

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        assert load_known_hosts(str(tmp_path / "nope.yaml")) == DEFAULT_KNOWN_HOSTS

    def test_malformed_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "hosts.yaml"
        path.write_text("hosts: [unclosed", encoding="utf-8")
        assert load_known_hosts(str(path)) == DEFAULT_KNOWN_HOSTS

    def test_non_mapping_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "hosts.yaml"
        path.write_text("- 192.168.1.1\n", encoding="utf-8")
        assert load_known_hosts(str(path)) == DEFAULT_KNOWN_HOSTS

    def test_partial_file_keeps_default_octets(self, tmp_path: Path):
        path = tmp_path / "hosts.yaml"
        path.write_text(yaml.safe_dump({"hosts": ["10.1.1.1"]}), encoding="utf-8")

        loaded = load_known_hosts(str(path))

        assert loaded.hosts == ["10.1.1.1"]
        assert loaded.scan_octets == DEFAULT_KNOWN_HOSTS.scan_octets

    def test_out_of_range_octet_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "hosts.yaml"
        path.write_text(yaml.safe_dump({"scan_octets": [1, 255]}), encoding="utf-8")
        assert load_known_hosts(str(path)) == DEFAULT_KNOWN_HOSTS


class TestKnownHostsModel:
    def test_rejects_octet_zero(self):
        with pytest.raises(ValidationError):
            KnownHosts(hosts=[], scan_octets=[0])

    def test_defaults_include_emulator_alias(self):
        assert "10.0.2.2" in DEFAULT_KNOWN_HOSTS.hosts
