"""Public models for the connectivity layer."""

from connectivity.models.api import ApiResponse, ResolveRequest, ServerIpRequest
from connectivity.models.probe import ProbeFailure, ProbeResult, ProbeStrategy
from connectivity.models.results import (
    ConnectionStatus,
    ConnectionTestReport,
    ResolveResult,
    UrlTestOutcome,
)

__all__ = [
    "ApiResponse",
    "ConnectionStatus",
    "ConnectionTestReport",
    "ProbeFailure",
    "ProbeResult",
    "ProbeStrategy",
    "ResolveRequest",
    "ResolveResult",
    "ServerIpRequest",
    "UrlTestOutcome",
]
