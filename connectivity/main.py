"""FastAPI application entry point for the local connection control API.

Startup: load settings, configure logging, build the connectivity service,
install it as the process-wide default, and start an initial resolution in
the background so requests are served while the network scan runs.
Shutdown: cancel the initial resolution if it is still running, then drop the
default service.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from fastapi import FastAPI

from connectivity.config.settings import ConnectivitySettings
from connectivity.logging_config import configure_logging
from connectivity.middleware.error_handler import register_error_handlers
from connectivity.routers.connection import create_connection_router
from connectivity.services.connectivity_service import ConnectivityService, set_service

logger = logging.getLogger(__name__)


async def _initial_resolution(service: ConnectivityService) -> None:
    result = await service.find_best_server_url()
    logger.info("Initial connection check: %s", result.message)


def create_app(
    settings: ConnectivitySettings | None = None,
    service: ConnectivityService | None = None,
    *,
    resolve_on_startup: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``service`` is injected by tests; otherwise one is built from ``settings``
    (or the environment).
    """
    settings = settings or ConnectivitySettings()
    service = service or ConnectivityService(settings)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        set_service(service)
        logger.info("Starting connection control API on port %d", settings.port)

        startup_task: asyncio.Task | None = None
        if resolve_on_startup:
            startup_task = asyncio.create_task(_initial_resolution(service))

        yield

        if startup_task is not None and not startup_task.done():
            startup_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await startup_task
            logger.info("Initial connection check cancelled at shutdown")

        set_service(None)
        logger.info("Connection control API shut down")

    app = FastAPI(
        title="Slugger Connectivity",
        version="1.0.0",
        lifespan=lifespan,
    )

    register_error_handlers(app)
    app.include_router(create_connection_router(service=service))

    return app


app = create_app()
