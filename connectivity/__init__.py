"""Adaptive API endpoint resolution and connection-health tracking."""

from connectivity.ledger.cache import ConnectionCache
from connectivity.models.results import ConnectionStatus, ResolveResult
from connectivity.services.connectivity_service import (
    ConnectivityService,
    check_server_connection,
    clear_connection_cache,
    find_best_server_url,
    get_api_url,
    get_connection_stats,
    get_prioritized_urls,
    get_service,
    ping_server,
    record_successful_connection,
    reset_connection_stats,
    run_connection_test,
    scan_network_for_server,
    set_server_ip,
    set_service,
)

__all__ = [
    "ConnectionCache",
    "ConnectionStatus",
    "ConnectivityService",
    "ResolveResult",
    "check_server_connection",
    "clear_connection_cache",
    "find_best_server_url",
    "get_api_url",
    "get_connection_stats",
    "get_prioritized_urls",
    "get_service",
    "ping_server",
    "record_successful_connection",
    "reset_connection_stats",
    "run_connection_test",
    "scan_network_for_server",
    "set_server_ip",
    "set_service",
]
