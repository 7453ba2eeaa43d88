"""Error hierarchy and FastAPI exception handlers for the control API.

Network failures met while probing candidates are never raised; they are
folded into ``ProbeResult`` values. The errors below cover the edges that do
raise: invalid manual input, callers that need a live server when none can
be resolved, and upstream failures seen by the resolving API client.
"""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error hierarchy
# ---------------------------------------------------------------------------


class ConnectivityError(Exception):
    """Base error for all connectivity-specific errors."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class InvalidServerAddressError(ConnectivityError):
    """Manually entered server address is not a dotted-quad IPv4 address."""

    status_code = 422
    message = "Please enter a valid IP address in the format xxx.xxx.xxx.xxx"


class NoWorkingUrlError(ConnectivityError):
    """Resolution ended offline so there is no server to send the request to."""

    status_code = 503
    message = "Cannot connect to any server"


class UpstreamRequestError(ConnectivityError):
    """The resolved server could not complete an API request."""

    status_code = 502
    message = "Upstream API request failed"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------


def _envelope(
    status_code: int,
    error: str,
    meta: dict | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "data": None,
            "error": error,
            "meta": meta,
        },
    )


async def _connectivity_error_handler(
    _request: Request, exc: ConnectivityError
) -> JSONResponse:
    meta = exc.details if exc.details else None
    return _envelope(exc.status_code, exc.message, meta=meta)


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI / Pydantic RequestValidationError (422)."""
    field_errors = [
        {
            "field": " -> ".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    return _envelope(
        status_code=422,
        error="Validation error",
        meta={"fields": field_errors},
    )


async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Catch-all — log traceback, return generic 500."""
    logger.error(
        "Unhandled exception: %s\n%s",
        exc,
        traceback.format_exc(),
    )
    return _envelope(status_code=500, error="Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    """Wire up all exception handlers on the FastAPI application."""
    app.add_exception_handler(ConnectivityError, _connectivity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)  # type: ignore[arg-type]
