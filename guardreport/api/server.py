"""
FastAPI application for Guard Report.

This module:
- Builds the app with lifespan management (create_app)
- Opens the MongoDB connection on startup; an unreachable database is fatal
- Verifies the mail connection in the background; failure is only logged
- Maps domain errors and malformed requests to {"error": ...} responses
- Provides health check endpoints
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from guardreport import __version__
from guardreport.api.dependencies import get_persistence
from guardreport.api.routes import error_response, router
from guardreport.config import Settings, get_settings
from guardreport.errors import StartupError, StorageError, ValidationError
from guardreport.notifications import NotificationGateway
from guardreport.observability import initialize_logfire
from guardreport.storage import PersistenceGateway, create_client, get_db_info, open_client
from guardreport.storage.connection import ClientFactory

logger = logging.getLogger(__name__)

INVALID_REQUEST = "Ogiltig förfrågan"


def create_app(
    settings: Optional[Settings] = None,
    persistence: Optional[PersistenceGateway] = None,
    notifier: Optional[NotificationGateway] = None,
    client_factory: ClientFactory = create_client,
) -> FastAPI:
    """
    Build the application.

    Gateways passed in are used as-is; missing ones are created by the
    lifespan from settings.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.
        Handles startup and shutdown events.
        """
        initialize_logfire(settings, app)
        logger.info(f"Starting Guard Report API (environment: {settings.environment})")

        client = None
        if app.state.persistence is None:
            client = await open_client(settings, client_factory)
            gateway = PersistenceGateway(client[settings.mongodb_database])
            try:
                await gateway.ensure_indexes()
            except StorageError as e:
                client.close()
                raise StartupError("Could not prepare the reports collection") from e
            app.state.persistence = gateway

        if app.state.notifier is None:
            app.state.notifier = NotificationGateway(settings)

        # Runs alongside request handling; the result is only logged.
        verification = asyncio.create_task(app.state.notifier.verify())
        verification.add_done_callback(log_verification_failure)

        logger.info("Guard Report API startup complete")

        yield

        logger.info("Shutting down Guard Report API")
        verification.cancel()
        if client is not None:
            client.close()

    app = FastAPI(
        title="Guard Report API",
        description="Incident reporting backend for security-guard staff",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.persistence = persistence
    app.state.notifier = notifier

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(router)
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/", root, methods=["GET"], tags=["Root"])

    return app


def log_verification_failure(task: asyncio.Task) -> None:
    """Log an unexpected error from the background mail check."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Mail verification crashed: {exc!r}", exc_info=exc)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        logger.info(f"Rejected {request.method} {request.url.path}: missing {exc.fields}")
        return error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info(f"Rejected malformed {request.method} {request.url.path}: {exc.errors()}")
        return error_response(400, INVALID_REQUEST)


# ============================================================================
# Health Check Endpoints
# ============================================================================

async def health_check(request: Request) -> Dict[str, str]:
    """
    Health check endpoint for load balancers and monitoring.

    Returns:
        dict: Health status of the application and database
    """
    db_connected = await get_persistence(request).ping()

    return {
        "status": "healthy" if db_connected else "degraded",
        "service": "guardreport-api",
        "version": __version__,
        "database": "connected" if db_connected else "disconnected",
    }


async def root(request: Request) -> Dict[str, str]:
    """
    Root endpoint - API information.
    """
    settings: Settings = request.app.state.settings
    return {
        "name": "Guard Report API",
        "version": __version__,
        "database": get_db_info(settings)["database"],
        "docs": "/docs",
        "health": "/health",
    }
