"""Endpoint candidate generation.

Produces the ordered list of API base URLs to try:

1. The cached working URL, alone, when one exists.
2. The deployed production URL.
3. The configured base URL (manual server IP or configured host + port).
4. In discovery mode, well-known LAN addresses at the configured port.

Lists are de-duplicated (first occurrence wins) and then reordered by the
success ledger. Network scans add two further sources: a known server IP
across several ports, and the device's /24 with the last octet replaced by
a curated set of common host numbers. The curated set is a heuristic and
will miss servers on unlisted addresses.
"""

from __future__ import annotations

import ipaddress
import logging

from connectivity.config.known_hosts import DEFAULT_KNOWN_HOSTS, KnownHosts
from connectivity.config.settings import ConnectivitySettings
from connectivity.ledger.cache import ConnectionCache

logger = logging.getLogger(__name__)


def dedupe(urls: list[str]) -> list[str]:
    """Drop repeated URLs, keeping the first occurrence of each."""
    seen: set[str] = set()
    unique: list[str] = []
    for url in urls:
        if url and url not in seen:
            seen.add(url)
            unique.append(url)
    return unique


class CandidateGenerator:
    """Builds prioritised candidate lists from settings, known hosts and the ledger."""

    def __init__(
        self,
        settings: ConnectivitySettings,
        cache: ConnectionCache,
        known_hosts: KnownHosts | None = None,
    ) -> None:
        self._settings = settings
        self._cache = cache
        self._known_hosts = known_hosts or DEFAULT_KNOWN_HOSTS

    def _api_url(self, host: str, port: int) -> str:
        return f"http://{host}:{port}{self._settings.api_path}"

    # ------------------------------------------------------------------
    # Static candidates
    # ------------------------------------------------------------------

    def get_api_urls(
        self,
        *,
        include_cached: bool = True,
        discovery: bool = False,
    ) -> list[str]:
        """Return the prioritised candidate list.

        With ``include_cached`` and a cached working URL, that URL is the
        only candidate. Never returns an empty list.
        """
        working_url = self._cache.working_url
        if include_cached and working_url:
            logger.debug("Using previously discovered working API URL: %s", working_url)
            return [working_url]

        urls = [self._settings.deployed_url, self._settings.configured_url]
        if discovery:
            urls.extend(self.well_known_urls())

        candidates = dedupe(urls)
        if not candidates:
            candidates = self.well_known_urls()

        return self._cache.prioritize(candidates)

    def well_known_urls(self) -> list[str]:
        """Fallback LAN addresses (routers, loopback, emulator alias)."""
        return dedupe(
            [self._api_url(host, self._settings.api_port) for host in self._known_hosts.hosts]
        )

    # ------------------------------------------------------------------
    # Scan candidates
    # ------------------------------------------------------------------

    def server_ip_urls(self, server_ip: str) -> list[str]:
        """A known server address across the configured and scan ports."""
        return [self._api_url(server_ip, port) for port in self._settings.ports_to_try]

    def subnet_urls(self, device_ip: str | None) -> list[str]:
        """Likely server addresses on the device's own /24.

        Returns an empty list for a missing or non-IPv4 device address. The
        device's own address is skipped.
        """
        if not device_ip:
            return []
        try:
            address = ipaddress.IPv4Address(device_ip)
        except ValueError:
            logger.warning("Ignoring invalid device IP for subnet scan: %s", device_ip)
            return []

        prefix = str(address).rsplit(".", 1)[0]
        own_octet = int(str(address).rsplit(".", 1)[1])

        urls: list[str] = []
        for octet in self._known_hosts.scan_octets:
            if octet == own_octet:
                continue
            host = f"{prefix}.{octet}"
            for port in self._settings.ports_to_try:
                urls.append(self._api_url(host, port))
        return dedupe(urls)
