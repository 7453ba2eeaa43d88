"""Shared test fixtures for the connectivity test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from connectivity.config.known_hosts import KnownHosts
from connectivity.config.settings import ConnectivitySettings
from connectivity.discovery.candidates import CandidateGenerator
from connectivity.ledger.cache import ConnectionCache
from connectivity.probing.prober import HealthProber
from connectivity.services.connectivity_service import ConnectivityService
from connectivity.services.resolver import ConnectionResolver

DEPLOYED_URL = "https://api.slugger.test/api"
CONFIGURED_URL = "http://10.0.0.5:5001/api"
DEVICE_IP = "192.168.1.37"


# ---------------------------------------------------------------------------
# Fake HTTP server behind a patched httpx.AsyncClient.get
# ---------------------------------------------------------------------------


class FakeServer:
    """Routes patched ``httpx.AsyncClient.get`` calls by exact URL.

    A route maps to an ``httpx.Response`` or to an exception instance that is
    raised. Unrouted URLs raise ``httpx.ConnectError``.
    """

    def __init__(self) -> None:
        self.routes: dict[str, httpx.Response | Exception] = {}
        self.calls: list[str] = []

    def pong(self, base: str) -> None:
        self.routes[f"{base}/ping"] = _response(f"{base}/ping", 200, text="PONG")

    def respond(self, url: str, status_code: int, text: str = "") -> None:
        self.routes[url] = _response(url, status_code, text=text)

    def fail(self, url: str, exc: Exception) -> None:
        self.routes[url] = exc

    async def handle(self, url: str, *args: object, **kwargs: object) -> httpx.Response:
        self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            raise httpx.ConnectError("Connection refused")
        if isinstance(route, Exception):
            raise route
        return route


def _response(url: str, status_code: int, text: str = "") -> httpx.Response:
    return httpx.Response(status_code, text=text, request=httpx.Request("GET", url))


@pytest.fixture
def fake_server():
    server = FakeServer()
    with patch("httpx.AsyncClient.get", new_callable=AsyncMock, side_effect=server.handle):
        yield server


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> ConnectivitySettings:
    return ConnectivitySettings(
        deployed_url=DEPLOYED_URL,
        api_host="10.0.0.5",
        api_port=5001,
        scan_ports=[5000],
        ping_timeout_seconds=1.5,
        health_timeout_seconds=5.0,
    )


@pytest.fixture
def known_hosts() -> KnownHosts:
    return KnownHosts(hosts=["192.168.1.1", "10.0.2.2", "localhost"], scan_octets=[1, 37, 100])


@pytest.fixture
def cache() -> ConnectionCache:
    return ConnectionCache()


@pytest.fixture
def generator(
    settings: ConnectivitySettings, cache: ConnectionCache, known_hosts: KnownHosts
) -> CandidateGenerator:
    return CandidateGenerator(settings, cache, known_hosts)


@pytest.fixture
def prober(settings: ConnectivitySettings) -> HealthProber:
    return HealthProber(settings)


@pytest.fixture
def resolver(
    settings: ConnectivitySettings,
    cache: ConnectionCache,
    generator: CandidateGenerator,
    prober: HealthProber,
) -> ConnectionResolver:
    return ConnectionResolver(
        settings,
        cache,
        generator,
        prober,
        is_connected=lambda: True,
        device_ip_provider=lambda: DEVICE_IP,
    )


@pytest.fixture
def service(
    settings: ConnectivitySettings, cache: ConnectionCache, known_hosts: KnownHosts
) -> ConnectivityService:
    return ConnectivityService(
        settings,
        cache,
        known_hosts,
        is_connected=lambda: True,
        device_ip_provider=lambda: DEVICE_IP,
    )

