"""Two-stage liveness prober for candidate API base URLs.

- Ping: GET ``/ping`` with a short deadline; reachable only on status 200
  with a body of exactly ``PONG``.
- Health-check: GET ``/health`` with a longer deadline; reachable on status
  200, the body is kept for diagnostics only.

Each request is bounded twice: by the httpx timeout per I/O phase and by an
``asyncio.wait_for`` deadline over the whole call, which cancels the request
when it expires. Timeouts, connection errors and unexpected responses come
back as a failed ``ProbeResult``; nothing is raised. The prober does not
touch the success ledger.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from urllib.parse import urlsplit

import httpx

from connectivity.config.known_hosts import EMULATOR_HOST_ALIAS
from connectivity.config.settings import ConnectivitySettings
from connectivity.models.probe import ProbeFailure, ProbeResult, ProbeStrategy
from connectivity.probing.urls import derive_health_url, derive_ping_url

logger = logging.getLogger(__name__)

PING_SENTINEL = "PONG"

_REQUEST_HEADERS = {"Accept": "application/json, text/plain"}


class HealthProber:
    """Issues ping and health-check probes against single candidates.

    Parameters
    ----------
    settings:
        Supplies the two timeouts and the runtime platform.
    """

    def __init__(self, settings: ConnectivitySettings) -> None:
        self._ping_timeout = settings.ping_timeout_seconds
        self._health_timeout = settings.health_timeout_seconds
        self._platform = settings.platform

    def should_skip(self, url: str) -> bool:
        """Emulator host aliases mean nothing outside an emulator."""
        if self._platform != "web":
            return False
        try:
            hostname = urlsplit(url).hostname
        except ValueError:
            return False
        return hostname == EMULATOR_HOST_ALIAS

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    async def ping(self, url: str) -> ProbeResult:
        """Cheap liveness probe expecting ``200 PONG``."""
        if self.should_skip(url):
            logger.debug("Skipping ping to emulator address %s in web mode", url)
            return ProbeResult.failed(url, ProbeStrategy.PING, ProbeFailure.SKIPPED)

        result = await self._request(url, derive_ping_url, ProbeStrategy.PING, self._ping_timeout)
        if isinstance(result, ProbeResult):
            return result

        response, duration_ms = result
        if response.status_code == 200 and response.text == PING_SENTINEL:
            return ProbeResult.success(
                url,
                ProbeStrategy.PING,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

        return self._bad_response(url, ProbeStrategy.PING, response, duration_ms)

    async def health_check(self, url: str) -> ProbeResult:
        """Heavier probe that only requires status 200."""
        if self.should_skip(url):
            logger.debug("Skipping health check to emulator address %s in web mode", url)
            return ProbeResult.failed(url, ProbeStrategy.HEALTH, ProbeFailure.SKIPPED)

        result = await self._request(
            url, derive_health_url, ProbeStrategy.HEALTH, self._health_timeout
        )
        if isinstance(result, ProbeResult):
            return result

        response, duration_ms = result
        if response.status_code == 200:
            return ProbeResult.success(
                url,
                ProbeStrategy.HEALTH,
                status_code=200,
                duration_ms=duration_ms,
                detail=response.text[:500] or None,
            )

        return self._bad_response(url, ProbeStrategy.HEALTH, response, duration_ms)

    async def probe(self, url: str) -> list[ProbeResult]:
        """Ping, then health-check only if the ping failed.

        Returns the probes made, in order; the last one decides reachability.
        """
        ping_result = await self.ping(url)
        if ping_result.reachable or ping_result.failure == ProbeFailure.SKIPPED:
            return [ping_result]
        return [ping_result, await self.health_check(url)]

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        candidate: str,
        derive_target: Callable[[str], str],
        strategy: ProbeStrategy,
        timeout: float,
    ) -> tuple[httpx.Response, float] | ProbeResult:
        """GET the derived endpoint within ``timeout``; failures come back as a ProbeResult."""
        start = time.monotonic()
        try:
            target = derive_target(candidate)
        except ValueError as exc:
            return self._failed(
                candidate, strategy, ProbeFailure.NETWORK_UNREACHABLE, start, f"invalid URL: {exc}"
            )

        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(timeout)) as client:
                response = await asyncio.wait_for(
                    client.get(target, headers=_REQUEST_HEADERS),
                    timeout=timeout,
                )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            return self._failed(
                candidate, strategy, ProbeFailure.TIMEOUT, start, f"no response within {timeout}s"
            )
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            return self._failed(
                candidate, strategy, ProbeFailure.NETWORK_UNREACHABLE, start, str(exc) or type(exc).__name__
            )

        return response, _elapsed_ms(start)

    def _failed(
        self,
        candidate: str,
        strategy: ProbeStrategy,
        failure: ProbeFailure,
        start: float,
        detail: str,
    ) -> ProbeResult:
        duration_ms = _elapsed_ms(start)
        logger.info(
            "%s failed for %s: %s",
            strategy.value.capitalize(),
            candidate,
            detail,
            extra={
                "candidate_url": candidate,
                "probe_strategy": strategy.value,
                "error_reason": failure.value,
                "duration_ms": duration_ms,
            },
        )
        return ProbeResult.failed(
            candidate, strategy, failure, duration_ms=duration_ms, detail=detail
        )

    def _bad_response(
        self,
        candidate: str,
        strategy: ProbeStrategy,
        response: httpx.Response,
        duration_ms: float,
    ) -> ProbeResult:
        logger.info(
            "%s to %s returned unexpected response (status %d)",
            strategy.value.capitalize(),
            candidate,
            response.status_code,
            extra={
                "candidate_url": candidate,
                "probe_strategy": strategy.value,
                "status_code": response.status_code,
                "error_reason": ProbeFailure.BAD_RESPONSE.value,
                "duration_ms": duration_ms,
            },
        )
        return ProbeResult.failed(
            candidate,
            strategy,
            ProbeFailure.BAD_RESPONSE,
            status_code=response.status_code,
            duration_ms=duration_ms,
            detail=response.text[:200] or None,
        )


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 2)
