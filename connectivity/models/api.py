"""Control API request bodies and the JSON response envelope.

All API responses are wrapped in the envelope:
{ success: bool, data: T | None, error: str | None, meta: dict | None }
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """JSON envelope for all API responses."""

    success: bool
    data: T | None = None
    error: str | None = None
    meta: dict | None = None


class ResolveRequest(BaseModel):
    """Body for POST /connection/resolve."""

    urls: list[str] | None = Field(default=None, max_length=50)
    scan_network: bool | None = None  # None: use settings.scan_enabled


class ServerIpRequest(BaseModel):
    """Body for PUT /connection/server-ip."""

    ip: str = Field(..., min_length=1, max_length=64)
