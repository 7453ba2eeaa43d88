"""Resolution result models returned to callers and the control API."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from connectivity.models.probe import ProbeResult


class ConnectionStatus(str, Enum):
    """Aggregate outcome of a resolution."""

    ONLINE = "online"
    OFFLINE = "offline"


class ResolveResult(BaseModel):
    """Structured outcome of ``ConnectionResolver.resolve``.

    ``prompt_manual_entry`` is set only when every strategy was exhausted,
    which is the cue for a UI to offer manual server address entry.
    """

    status: ConnectionStatus
    url: str | None = None
    message: str
    attempts: list[ProbeResult] = Field(default_factory=list)
    prompt_manual_entry: bool = False

    @property
    def is_online(self) -> bool:
        return self.status == ConnectionStatus.ONLINE


class UrlTestOutcome(BaseModel):
    """Per-URL row of a direct connection test."""

    success: bool
    status_code: int | None = None
    error: str | None = None
    data: dict | None = None


class ConnectionTestReport(BaseModel):
    """Result of a direct health-check sweep over the configured and fallback hosts."""

    results: dict[str, UrlTestOutcome] = Field(default_factory=dict)
    working_url: str | None = None

    @property
    def found(self) -> bool:
        return self.working_url is not None
