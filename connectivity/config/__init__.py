"""Configuration module — settings and known LAN hosts."""

from connectivity.config.known_hosts import (
    DEFAULT_KNOWN_HOSTS,
    EMULATOR_HOST_ALIAS,
    KnownHosts,
    load_known_hosts,
)
from connectivity.config.settings import ConnectivitySettings

__all__ = [
    "DEFAULT_KNOWN_HOSTS",
    "EMULATOR_HOST_ALIAS",
    "ConnectivitySettings",
    "KnownHosts",
    "load_known_hosts",
]
