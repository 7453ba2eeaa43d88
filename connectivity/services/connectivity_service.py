"""Connectivity service — wires the resolver stack and exposes the caller API.

``ConnectivityService`` owns one ``ConnectionCache`` and the generator,
prober and resolver built around it. Tests and embedders create their own
instances; application code uses the module-level functions below, which
act on a lazily created process-wide default service.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from connectivity.config.known_hosts import KnownHosts, load_known_hosts
from connectivity.config.settings import ConnectivitySettings
from connectivity.discovery.candidates import CandidateGenerator
from connectivity.discovery.network_info import get_device_ip, has_network_interface
from connectivity.ledger.cache import ConnectionCache
from connectivity.models.results import (
    ConnectionStatus,
    ConnectionTestReport,
    ResolveResult,
)
from connectivity.probing.prober import HealthProber
from connectivity.services.resolver import ConnectionResolver
from connectivity.validators.address import validate_server_ip

logger = logging.getLogger(__name__)


class ConnectivityService:
    """Facade over candidate generation, probing, the ledger and resolution."""

    def __init__(
        self,
        settings: ConnectivitySettings | None = None,
        cache: ConnectionCache | None = None,
        known_hosts: KnownHosts | None = None,
        *,
        is_connected: Callable[[], bool] = has_network_interface,
        device_ip_provider: Callable[[], str | None] = get_device_ip,
    ) -> None:
        self.settings = settings or ConnectivitySettings()
        self.cache = cache or ConnectionCache()
        if known_hosts is None:
            known_hosts = load_known_hosts(self.settings.known_hosts_path)

        self.generator = CandidateGenerator(self.settings, self.cache, known_hosts)
        self.prober = HealthProber(self.settings)
        self.resolver = ConnectionResolver(
            self.settings,
            self.cache,
            self.generator,
            self.prober,
            is_connected=is_connected,
            device_ip_provider=device_ip_provider,
        )

    # ------------------------------------------------------------------
    # Candidates and ledger
    # ------------------------------------------------------------------

    def get_api_url(self, *, discovery: bool = False) -> list[str]:
        return self.generator.get_api_urls(discovery=discovery)

    def get_prioritized_urls(self, urls: list[str]) -> list[str]:
        return self.cache.prioritize(urls)

    def record_successful_connection(self, url: str) -> int:
        return self.cache.record_success(url)

    def get_connection_stats(self) -> dict[str, int]:
        return self.cache.get_stats()

    def reset_connection_stats(self) -> None:
        self.cache.reset()

    def clear_connection_cache(self) -> None:
        self.cache.clear_working_url()

    def snapshot(self) -> dict:
        data = self.cache.snapshot()
        data["server_ip"] = self.settings.server_ip
        data["platform"] = self.settings.platform
        return data

    # ------------------------------------------------------------------
    # Probing and resolution
    # ------------------------------------------------------------------

    async def ping_server(self, url: str) -> bool:
        """Single ping probe. Does not touch the ledger."""
        return (await self.prober.ping(url)).reachable

    async def check_server_connection(
        self,
        urls: list[str] | None = None,
        *,
        scan_network: bool | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> ResolveResult:
        return await self.resolver.resolve(
            urls, scan_network=scan_network, cancel_event=cancel_event
        )

    async def scan_network_for_server(
        self, cancel_event: asyncio.Event | None = None
    ) -> ResolveResult:
        return await self.resolver.scan_network_for_server(cancel_event)

    async def run_connection_test(self) -> ConnectionTestReport:
        return await self.resolver.run_connection_test()

    async def find_best_server_url(
        self, cancel_event: asyncio.Event | None = None
    ) -> ResolveResult:
        """Best-effort lookup used at app start.

        In web mode localhost is pinged first. Without a cached working URL a
        network scan runs before the regular connection check. Setting
        ``cancel_event`` stops the lookup before its next probe.
        """
        if self.settings.platform == "web" and not _is_set(cancel_event):
            localhost_url = (
                f"http://localhost:{self.settings.api_port}{self.settings.api_path}"
            )
            if await self.ping_server(localhost_url):
                self.cache.record_success(localhost_url)
                return ResolveResult(
                    status=ConnectionStatus.ONLINE,
                    url=localhost_url,
                    message="Server is reachable via localhost (web environment)",
                )

        if self.cache.working_url is None:
            logger.info("No cached server connection, trying to scan network")
            scan_result = await self.scan_network_for_server(cancel_event)
            if scan_result.is_online or _is_set(cancel_event):
                return scan_result

        return await self.check_server_connection(cancel_event=cancel_event)

    def set_server_ip(self, ip: str) -> str:
        """Store a manually entered server address and drop the cached URL.

        Raises ``InvalidServerAddressError`` for anything but dotted-quad IPv4.
        """
        address = validate_server_ip(ip)
        self.settings.server_ip = address
        self.cache.clear_working_url()
        logger.info("Server IP set to %s", address)
        return address


def _is_set(cancel_event: asyncio.Event | None) -> bool:
    return cancel_event is not None and cancel_event.is_set()


# ---------------------------------------------------------------------------
# Process-wide default service
# ---------------------------------------------------------------------------

_default_service: ConnectivityService | None = None


def get_service() -> ConnectivityService:
    """Return the default service, creating it from the environment on first use."""
    global _default_service
    if _default_service is None:
        _default_service = ConnectivityService()
    return _default_service


def set_service(service: ConnectivityService | None) -> None:
    """Replace (or with None, discard) the default service."""
    global _default_service
    _default_service = service


def get_api_url() -> list[str]:
    return get_service().get_api_url()


def get_prioritized_urls(urls: list[str]) -> list[str]:
    return get_service().get_prioritized_urls(urls)


def record_successful_connection(url: str) -> int:
    return get_service().record_successful_connection(url)


def get_connection_stats() -> dict[str, int]:
    return get_service().get_connection_stats()


def reset_connection_stats() -> None:
    get_service().reset_connection_stats()


def clear_connection_cache() -> None:
    get_service().clear_connection_cache()


def set_server_ip(ip: str) -> str:
    return get_service().set_server_ip(ip)


async def ping_server(url: str) -> bool:
    return await get_service().ping_server(url)


async def check_server_connection(
    urls: list[str] | None = None,
    *,
    scan_network: bool | None = None,
    cancel_event: asyncio.Event | None = None,
) -> ResolveResult:
    return await get_service().check_server_connection(
        urls, scan_network=scan_network, cancel_event=cancel_event
    )


async def scan_network_for_server(cancel_event: asyncio.Event | None = None) -> ResolveResult:
    return await get_service().scan_network_for_server(cancel_event)


async def run_connection_test() -> ConnectionTestReport:
    return await get_service().run_connection_test()


async def find_best_server_url(cancel_event: asyncio.Event | None = None) -> ResolveResult:
    return await get_service().find_best_server_url(cancel_event)
