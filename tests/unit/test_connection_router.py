"""Unit tests for the connection control endpoints."""

from __future__ import annotations

import asyncio
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from connectivity.config.known_hosts import KnownHosts
from connectivity.config.settings import ConnectivitySettings
from connectivity.main import create_app
from connectivity.services.connectivity_service import ConnectivityService


@pytest.fixture
def client(settings: ConnectivitySettings, service: ConnectivityService) -> TestClient:
    app = create_app(settings, service, resolve_on_startup=False)
    return TestClient(app, raise_server_exceptions=False)


class TestStatus:
    def test_reports_snapshot(self, client: TestClient, service: ConnectivityService) -> None:
        service.record_successful_connection("http://10.0.0.9/api")

        resp = client.get("/connection")

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["working_url"] == "http://10.0.0.9/api"
        assert data["stats"] == {"http://10.0.0.9/api": 1}


class TestResolve:
    def test_online(self, client: TestClient, fake_server) -> None:
        fake_server.pong("http://10.0.0.9")

        resp = client.post("/connection/resolve", json={"urls": ["http://10.0.0.9/api"]})

        body = resp.json()
        assert resp.status_code == 200
        assert body["success"] is True
        assert body["data"]["status"] == "online"
        assert body["data"]["url"] == "http://10.0.0.9/api"
        assert body["data"]["attempts"][0]["strategy"] == "ping"

    def test_offline_is_503(self, client: TestClient, fake_server) -> None:
        resp = client.post("/connection/resolve", json={})

        body = resp.json()
        assert resp.status_code == 503
        assert body["success"] is False
        assert body["data"]["prompt_manual_entry"] is True
        assert body["error"].startswith("Cannot connect to any server")

    def test_malformed_url_is_skipped_not_500(self, client: TestClient, fake_server) -> None:
        fake_server.pong("http://10.0.0.9")

        resp = client.post(
            "/connection/resolve", json={"urls": ["http://[bad/api", "http://10.0.0.9/api"]}
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["url"] == "http://10.0.0.9/api"

    def test_scan_follows_settings_when_not_requested(
        self, settings: ConnectivitySettings, known_hosts: KnownHosts, fake_server
    ) -> None:
        settings.scan_enabled = True
        service = ConnectivityService(
            settings,
            known_hosts=known_hosts,
            is_connected=lambda: True,
            device_ip_provider=lambda: "192.168.1.37",
        )
        client = TestClient(create_app(settings, service, resolve_on_startup=False))
        fake_server.pong("http://192.168.1.100:5001")

        resp = client.post("/connection/resolve", json={})

        assert resp.status_code == 200
        assert resp.json()["data"]["message"] == "Server found via network scan"

    def test_explicit_false_disables_scan(
        self, client: TestClient, settings: ConnectivitySettings, fake_server
    ) -> None:
        settings.scan_enabled = True
        fake_server.pong("http://192.168.1.100:5001")

        resp = client.post("/connection/resolve", json={"scan_network": False})

        assert resp.status_code == 503

    def test_rejects_too_many_urls(self, client: TestClient) -> None:
        resp = client.post(
            "/connection/resolve", json={"urls": [f"http://h{i}/api" for i in range(51)]}
        )
        assert resp.status_code == 422


class TestScanAndTest:
    def test_scan_finds_server(self, client: TestClient, fake_server) -> None:
        fake_server.pong("http://192.168.1.1:5001")

        resp = client.post("/connection/scan")

        assert resp.status_code == 200
        assert resp.json()["data"]["message"] == "Server found"

    def test_connection_test_report(self, client: TestClient, fake_server) -> None:
        fake_server.respond("http://10.0.0.5:5001/health", 200, text='{"ok": true}')

        resp = client.post("/connection/test")

        body = resp.json()
        assert body["success"] is True
        assert body["data"]["working_url"] == "http://10.0.0.5:5001/api"
        assert body["data"]["results"]["http://10.0.0.5:5001/api"]["data"] == {"ok": True}

    def test_connection_test_nothing_found(self, client: TestClient, fake_server) -> None:
        body = client.post("/connection/test").json()
        assert body["success"] is False
        assert body["error"] == "Could not connect to any server"


class TestLedgerEndpoints:
    def test_stats_and_reset(self, client: TestClient, service: ConnectivityService) -> None:
        service.record_successful_connection("http://10.0.0.9/api")

        assert client.get("/connection/stats").json()["data"] == {"http://10.0.0.9/api": 1}
        assert client.delete("/connection/stats").status_code == 200
        assert client.get("/connection/stats").json()["data"] == {}
        assert service.cache.working_url == "http://10.0.0.9/api"

    def test_clear_cache(self, client: TestClient, service: ConnectivityService) -> None:
        service.record_successful_connection("http://10.0.0.9/api")

        resp = client.delete("/connection/cache")

        assert resp.json()["data"] == {"working_url": None}
        assert service.cache.working_url is None


class TestServerIp:
    def test_valid_address(self, client: TestClient, service: ConnectivityService) -> None:
        resp = client.put("/connection/server-ip", json={"ip": "192.168.1.20"})

        assert resp.status_code == 200
        assert resp.json()["data"] == {
            "server_ip": "192.168.1.20",
            "configured_url": "http://192.168.1.20:5001/api",
        }
        assert service.settings.server_ip == "192.168.1.20"

    def test_invalid_address_is_422(self, client: TestClient, service: ConnectivityService) -> None:
        resp = client.put("/connection/server-ip", json={"ip": "192.168.1"})

        body = resp.json()
        assert resp.status_code == 422
        assert body["error"] == "Please enter a valid IP address in the format xxx.xxx.xxx.xxx"
        assert service.settings.server_ip is None

    def test_missing_body_field(self, client: TestClient) -> None:
        resp = client.put("/connection/server-ip", json={})
        assert resp.status_code == 422
        assert resp.json()["error"] == "Validation error"


class TestStartupResolution:
    def test_requests_served_while_initial_check_runs(self, service: ConnectivityService) -> None:
        started = []
        cancelled = []

        async def slow_lookup(cancel_event=None):
            started.append(True)
            try:
                await asyncio.sleep(3600)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise

        app = create_app(service.settings, service)
        with patch.object(service, "find_best_server_url", side_effect=slow_lookup), patch(
            "connectivity.main.configure_logging"
        ):
            with TestClient(app) as client:
                resp = client.get("/connection")
                assert resp.status_code == 200

        assert started == [True]
        assert cancelled == [True]
