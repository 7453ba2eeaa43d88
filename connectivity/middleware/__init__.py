"""Middleware package — error hierarchy and exception handlers."""

from connectivity.middleware.error_handler import (
    ConnectivityError,
    InvalidServerAddressError,
    NoWorkingUrlError,
    UpstreamRequestError,
    register_error_handlers,
)

__all__ = [
    "ConnectivityError",
    "InvalidServerAddressError",
    "NoWorkingUrlError",
    "UpstreamRequestError",
    "register_error_handlers",
]
