"""Liveness probing for candidate API base URLs."""

from connectivity.probing.prober import PING_SENTINEL, HealthProber
from connectivity.probing.urls import derive_health_url, derive_ping_url

__all__ = [
    "PING_SENTINEL",
    "HealthProber",
    "derive_health_url",
    "derive_ping_url",
]
