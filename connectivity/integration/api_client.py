"""HTTP client that resolves the API base URL before every request.

Screens call ``request``/``get``/``post`` with a path relative to the API
base (``/activities``, ``/teams/join``). The base comes from the cached
working URL, or from a full resolution when nothing is cached. If the
request cannot reach the server, the cached URL is treated as stale: the
client resolves once more and retries on whatever URL wins. Non-idempotent
methods are resent only after connect failures, never after a read timeout.
HTTP error statuses are returned to the caller untouched.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from connectivity.middleware.error_handler import NoWorkingUrlError, UpstreamRequestError
from connectivity.services.connectivity_service import ConnectivityService

logger = logging.getLogger(__name__)

_IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})


def _can_resend(method: str, exc: httpx.HTTPError) -> bool:
    """Connect failures never reached the server; other timeouts may have."""
    if isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout)):
        return True
    return method.upper() in _IDEMPOTENT_METHODS and isinstance(exc, httpx.TimeoutException)


class ResolvingApiClient:
    """API client bound to a ``ConnectivityService``.

    Parameters
    ----------
    service:
        Supplies the working URL and performs resolution.
    timeout_seconds:
        Per-request timeout for API calls (default 15s).
    """

    def __init__(self, service: ConnectivityService, timeout_seconds: float = 15.0) -> None:
        self._service = service
        self._timeout_seconds = timeout_seconds

    async def base_url(self) -> str:
        """Return the working URL, resolving first when none is cached.

        Raises
        ------
        NoWorkingUrlError
            If resolution ends offline.
        """
        working_url = self._service.cache.working_url
        if working_url:
            return working_url
        return await self._resolve()

    async def _resolve(self) -> str:
        result = await self._service.check_server_connection()
        if not result.is_online or result.url is None:
            raise NoWorkingUrlError(result.message, prompt_manual_entry=result.prompt_manual_entry)
        return result.url

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        """Send a request to ``{base_url}{path}``.

        Raises
        ------
        NoWorkingUrlError
            If no server can be resolved.
        UpstreamRequestError
            If the request fails and cannot be resent, or still fails after
            re-resolving.
        """
        base = await self.base_url()
        try:
            return await self._send(method, base, path, json=json, params=params, headers=headers)
        except httpx.HTTPError as exc:
            if not _can_resend(method, exc):
                logger.error(
                    "%s %s failed without retry: %s",
                    method,
                    base,
                    exc,
                    extra={"candidate_url": base, "error_reason": str(exc)},
                )
                raise UpstreamRequestError(url=f"{base}{path}") from exc
            logger.warning(
                "Request to %s failed (%s), re-resolving server",
                base,
                type(exc).__name__,
                extra={"candidate_url": base, "error_reason": str(exc)},
            )

        base = await self._resolve()
        try:
            return await self._send(method, base, path, json=json, params=params, headers=headers)
        except httpx.HTTPError as exc:
            logger.error(
                "Request to %s failed after re-resolving: %s",
                base,
                exc,
                extra={"candidate_url": base, "error_reason": str(exc)},
            )
            raise UpstreamRequestError(url=f"{base}{path}") from exc

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def _send(
        self,
        method: str,
        base: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        url = f"{base.rstrip('/')}/{path.lstrip('/')}"
        async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout_seconds)) as client:
            return await client.request(method, url, **kwargs)
