"""Connection control endpoints.

- GET    /connection            — working URL, stats, server IP
- POST   /connection/resolve    — run a resolution (optional URLs / network scan)
- POST   /connection/scan       — scan the local network only
- POST   /connection/test       — direct health-check sweep
- GET    /connection/stats      — success counts per URL
- DELETE /connection/stats      — reset success counts
- DELETE /connection/cache      — forget the working URL
- PUT    /connection/server-ip  — store a manually entered server address
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Response

from connectivity.models.api import ApiResponse, ResolveRequest, ServerIpRequest

logger = logging.getLogger(__name__)


def _resolve_payload(result: Any, response: Response) -> dict:
    if not result.is_online:
        response.status_code = 503
    return ApiResponse(
        success=result.is_online,
        data=result.model_dump(mode="json"),
        error=None if result.is_online else result.message,
    ).model_dump()


def create_connection_router(*, service: Any = None) -> APIRouter:
    """Factory that creates the connection router bound to a ConnectivityService."""

    connection_router = APIRouter(prefix="/connection", tags=["connection"])

    @connection_router.get("")
    async def status() -> dict:
        return ApiResponse(success=True, data=service.snapshot()).model_dump()

    @connection_router.post("/resolve")
    async def resolve(body: ResolveRequest, response: Response) -> dict:
        """Resolve a working server. 503 when every candidate fails."""
        result = await service.check_server_connection(
            body.urls, scan_network=body.scan_network
        )
        return _resolve_payload(result, response)

    @connection_router.post("/scan")
    async def scan(response: Response) -> dict:
        result = await service.scan_network_for_server()
        return _resolve_payload(result, response)

    @connection_router.post("/test")
    async def test_connection() -> dict:
        report = await service.run_connection_test()
        return ApiResponse(
            success=report.found,
            data=report.model_dump(mode="json"),
            error=None if report.found else "Could not connect to any server",
        ).model_dump()

    @connection_router.get("/stats")
    async def get_stats() -> dict:
        return ApiResponse(success=True, data=service.get_connection_stats()).model_dump()

    @connection_router.delete("/stats")
    async def reset_stats() -> dict:
        service.reset_connection_stats()
        return ApiResponse(success=True, data={}).model_dump()

    @connection_router.delete("/cache")
    async def clear_cache() -> dict:
        service.clear_connection_cache()
        return ApiResponse(success=True, data={"working_url": None}).model_dump()

    @connection_router.put("/server-ip")
    async def set_server_ip(body: ServerIpRequest) -> dict:
        """Store a manual server IP. 422 for anything but dotted-quad IPv4."""
        address = service.set_server_ip(body.ip)
        return ApiResponse(
            success=True,
            data={"server_ip": address, "configured_url": service.settings.configured_url},
        ).model_dump()

    return connection_router
