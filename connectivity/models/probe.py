"""Probe outcome models.

A probe never raises for network conditions; it returns a ``ProbeResult``
whose ``failure`` names why the candidate was judged unreachable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ProbeStrategy(str, Enum):
    """Liveness check used against a candidate."""

    PING = "ping"
    HEALTH = "health"


class ProbeFailure(str, Enum):
    """Why a probe did not confirm reachability."""

    TIMEOUT = "timeout"
    NETWORK_UNREACHABLE = "network_unreachable"
    BAD_RESPONSE = "bad_response"
    NO_CONNECTIVITY = "no_connectivity"
    SKIPPED = "skipped"


@dataclass
class ProbeResult:
    """Outcome of a single ping or health-check against one candidate."""

    url: str  # The candidate, not the derived /ping or /health URL
    strategy: ProbeStrategy
    reachable: bool
    failure: ProbeFailure | None = None
    status_code: int | None = None
    duration_ms: float = 0.0
    detail: str | None = None

    @classmethod
    def success(
        cls,
        url: str,
        strategy: ProbeStrategy,
        *,
        status_code: int,
        duration_ms: float,
        detail: str | None = None,
    ) -> ProbeResult:
        return cls(
            url=url,
            strategy=strategy,
            reachable=True,
            status_code=status_code,
            duration_ms=duration_ms,
            detail=detail,
        )

    @classmethod
    def failed(
        cls,
        url: str,
        strategy: ProbeStrategy,
        failure: ProbeFailure,
        *,
        status_code: int | None = None,
        duration_ms: float = 0.0,
        detail: str | None = None,
    ) -> ProbeResult:
        return cls(
            url=url,
            strategy=strategy,
            reachable=False,
            failure=failure,
            status_code=status_code,
            duration_ms=duration_ms,
            detail=detail,
        )

    def __bool__(self) -> bool:
        return self.reachable
