"""Endpoint resolver — finds a live API server and caches it.

Resolution order:

1. Bail out offline if the device has no network interface up.
2. Re-probe the cached working URL (ping, then health-check).
3. Walk the prioritised candidates, ping then health-check each.
4. Optionally scan the LAN: the known server IP across several ports, the
   well-known hosts (gateways, loopback, emulator alias), then common host
   numbers on the device's own /24.
5. Otherwise report offline and flag that manual entry should be offered.

Candidates are probed strictly one after another and each at most once per
call, so a single resolution records at most one success. A failed cached
URL stays cached until some other candidate succeeds. The resolver returns a
``ResolveResult`` for every outcome and never raises for network failures.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable

from connectivity.config.settings import ConnectivitySettings
from connectivity.discovery.candidates import CandidateGenerator, dedupe
from connectivity.discovery.network_info import get_device_ip, has_network_interface
from connectivity.ledger.cache import ConnectionCache
from connectivity.models.probe import ProbeFailure, ProbeResult, ProbeStrategy
from connectivity.models.results import (
    ConnectionStatus,
    ConnectionTestReport,
    ResolveResult,
    UrlTestOutcome,
)
from connectivity.probing.prober import HealthProber
from connectivity.validators.address import is_ipv4_address

logger = logging.getLogger(__name__)

NO_NETWORK_MESSAGE = "No internet connection. Please check your network settings."
OFFLINE_MESSAGE = (
    "Cannot connect to any server. Please check your network connection and server status."
)
CANCELLED_MESSAGE = "Connection check cancelled"


class _ResolutionCancelled(Exception):
    """Raised internally when the caller's cancel event is set."""


class ConnectionResolver:
    """Orchestrates candidate generation, probing and ledger updates.

    Parameters
    ----------
    settings:
        Runtime configuration (server IP, device IP override, scan default).
    cache:
        Shared success ledger and working-URL cache.
    generator:
        Produces and prioritises candidate URLs.
    prober:
        Performs ping and health-check probes.
    is_connected:
        Returns False when the device has no usable network interface.
    device_ip_provider:
        Returns the device's own IPv4 address for subnet scans.
    """

    def __init__(
        self,
        settings: ConnectivitySettings,
        cache: ConnectionCache,
        generator: CandidateGenerator,
        prober: HealthProber,
        *,
        is_connected: Callable[[], bool] = has_network_interface,
        device_ip_provider: Callable[[], str | None] = get_device_ip,
    ) -> None:
        self._settings = settings
        self._cache = cache
        self._generator = generator
        self._prober = prober
        self._is_connected = is_connected
        self._device_ip_provider = device_ip_provider

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def resolve(
        self,
        urls: list[str] | None = None,
        *,
        scan_network: bool | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> ResolveResult:
        """Find a reachable server, preferring the cached working URL.

        ``urls`` replaces the generated candidate list when given.
        ``scan_network`` defaults to ``settings.scan_enabled``.
        """
        if scan_network is None:
            scan_network = self._settings.scan_enabled

        if not self._is_connected():
            logger.warning("No network interface available, skipping resolution")
            return ResolveResult(
                status=ConnectionStatus.OFFLINE,
                message=NO_NETWORK_MESSAGE,
                attempts=[
                    ProbeResult.failed("", ProbeStrategy.PING, ProbeFailure.NO_CONNECTIVITY)
                ],
            )

        attempts: list[ProbeResult] = []
        try:
            cached = self._cache.working_url
            if cached:
                found = await self._try_candidate(cached, attempts, cancel_event)
                if found is not None:
                    return self._online(found, attempts)
                logger.info("Cached URL %s no longer working, trying alternatives", cached)

            if urls is None:
                candidates = self._generator.get_api_urls(include_cached=False)
            else:
                candidates = self._cache.prioritize(dedupe(list(urls)))
            candidates = [url for url in candidates if url != cached]
            logger.debug("Trying to connect to these URLs: %s", candidates)

            found = await self._walk(candidates, attempts, cancel_event)
            if found is not None:
                return self._online(found, attempts)

            if scan_network:
                tried = set(candidates)
                if cached:
                    tried.add(cached)
                scan_urls = [
                    url
                    for url in self._scan_candidates(include_well_known=True)
                    if url not in tried
                ]
                found = await self._walk(scan_urls, attempts, cancel_event)
                if found is not None:
                    return self._online(found, attempts, message="Server found via network scan")
        except _ResolutionCancelled:
            logger.info("Connection check cancelled after %d probes", len(attempts))
            return ResolveResult(
                status=ConnectionStatus.OFFLINE,
                message=CANCELLED_MESSAGE,
                attempts=attempts,
            )

        logger.warning(
            "Cannot connect to any server after %d probes",
            len(attempts),
            extra={"attempts": len(attempts)},
        )
        return ResolveResult(
            status=ConnectionStatus.OFFLINE,
            message=OFFLINE_MESSAGE,
            attempts=attempts,
            prompt_manual_entry=True,
        )

    async def scan_network_for_server(
        self, cancel_event: asyncio.Event | None = None
    ) -> ResolveResult:
        """Probe the known server IP and the device's subnet only."""
        scan_urls = self._scan_candidates()
        if not scan_urls:
            logger.info("No server or device IP available for a network scan")
            return ResolveResult(
                status=ConnectionStatus.OFFLINE,
                message="No server IP found",
                prompt_manual_entry=True,
            )

        logger.info("Scanning network for server across %d candidates", len(scan_urls))
        attempts: list[ProbeResult] = []
        try:
            found = await self._walk(scan_urls, attempts, cancel_event)
        except _ResolutionCancelled:
            return ResolveResult(
                status=ConnectionStatus.OFFLINE,
                message=CANCELLED_MESSAGE,
                attempts=attempts,
            )

        if found is not None:
            return self._online(found, attempts, message="Server found")
        return ResolveResult(
            status=ConnectionStatus.OFFLINE,
            message="No server found on network",
            attempts=attempts,
            prompt_manual_entry=True,
        )

    async def run_connection_test(self) -> ConnectionTestReport:
        """Health-check the configured server, then the well-known hosts.

        Stops at the first success, which is recorded in the ledger.
        """
        report = ConnectionTestReport()
        urls = dedupe([self._settings.configured_url, *self._generator.well_known_urls()])

        for url in urls:
            result = await self._prober.health_check(url)
            report.results[url] = _outcome(result)
            if result.reachable:
                self._cache.record_success(url)
                report.working_url = url
                break

        if report.working_url is None:
            logger.warning("Direct connection test found no server among %d URLs", len(urls))
        return report

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _scan_candidates(self, *, include_well_known: bool = False) -> list[str]:
        """Server IP across ports, optionally the well-known hosts, then the subnet."""
        urls: list[str] = []

        server_ip = self._settings.server_ip or self._settings.api_host
        if server_ip and is_ipv4_address(server_ip):
            urls.extend(self._generator.server_ip_urls(server_ip))

        if include_well_known:
            urls.extend(self._generator.well_known_urls())

        device_ip = self._settings.device_ip or self._device_ip_provider()
        urls.extend(self._generator.subnet_urls(device_ip))
        return dedupe(urls)

    async def _walk(
        self,
        urls: list[str],
        attempts: list[ProbeResult],
        cancel_event: asyncio.Event | None,
    ) -> ProbeResult | None:
        for url in urls:
            found = await self._try_candidate(url, attempts, cancel_event)
            if found is not None:
                return found
        return None

    async def _try_candidate(
        self,
        url: str,
        attempts: list[ProbeResult],
        cancel_event: asyncio.Event | None,
    ) -> ProbeResult | None:
        """Ping, then health-check. Returns the succeeding probe, if any."""
        _check_cancelled(cancel_event)
        ping_result = await self._prober.ping(url)
        attempts.append(ping_result)
        if ping_result.reachable:
            return ping_result
        if ping_result.failure == ProbeFailure.SKIPPED:
            return None

        _check_cancelled(cancel_event)
        health_result = await self._prober.health_check(url)
        attempts.append(health_result)
        if health_result.reachable:
            return health_result
        return None

    def _online(
        self,
        found: ProbeResult,
        attempts: list[ProbeResult],
        message: str | None = None,
    ) -> ResolveResult:
        self._cache.record_success(found.url)
        if message is None:
            message = (
                "Server is reachable (ping)"
                if found.strategy == ProbeStrategy.PING
                else "Server is reachable"
            )
        logger.info(
            "Connected to %s",
            found.url,
            extra={
                "candidate_url": found.url,
                "probe_strategy": found.strategy.value,
                "duration_ms": found.duration_ms,
                "attempts": len(attempts),
            },
        )
        return ResolveResult(
            status=ConnectionStatus.ONLINE,
            url=found.url,
            message=message,
            attempts=attempts,
        )


def _check_cancelled(cancel_event: asyncio.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise _ResolutionCancelled()


def _outcome(result: ProbeResult) -> UrlTestOutcome:
    data = None
    if result.reachable and result.detail:
        try:
            parsed = json.loads(result.detail)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            data = parsed
    return UrlTestOutcome(
        success=result.reachable,
        status_code=result.status_code,
        error=None if result.reachable else (result.detail or result.failure.value),
        data=data,
    )
