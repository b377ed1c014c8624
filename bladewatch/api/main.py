"""
Bladewatch API Main Application
===============================

FastAPI application entry point for the Bladewatch API.

Features:
    - OpenAPI documentation at /docs
    - Inspection, finding and repair plan endpoints
    - WebSocket and SSE repair plan notifications
    - Domain error mapping (404 / 409)
    - Async lifespan management

Usage:
    # Development:
    uvicorn bladewatch.api.main:app --reload

    # Production:
    uvicorn bladewatch.api.main:app --host 0.0.0.0 --port 4000

Author: Bladewatch Team
Version: 1.0.0
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bladewatch.config import settings
from bladewatch.api.dependencies import ServiceContainer
from bladewatch.api.routes import (
    health_router,
    inspections_router,
    findings_router,
    repair_plans_router,
    events_router,
)
from bladewatch.exceptions import ConflictError, NotFoundError


# Configure structured logging
from bladewatch.logging import setup_logging, get_logger, RequestLoggingMiddleware
setup_logging(
    level=settings.log_level,
    json_output=not settings.debug,
    service=settings.app_name,
    version=settings.app_version,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Handles startup and shutdown of services.
    """
    logger.info("Starting Bladewatch API...")

    container = ServiceContainer.get_instance()
    await container.initialize()

    logger.info("Bladewatch API started successfully")

    yield

    logger.info("Shutting down Bladewatch API...")
    await container.shutdown()
    logger.info("Bladewatch API shutdown complete")


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": str(exc), "entity": exc.entity, "id": exc.entity_id},
    )


async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    content = {"error": exc.message}
    if exc.detail:
        content["details"] = exc.detail
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=content)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    app = FastAPI(
        title="Bladewatch API",
        description=(
            "Wind-turbine inspection and repair planning API\n\n"
            "- One inspection per turbine per calendar day\n"
            "- Severity rules applied to findings on write\n"
            "- Repair plan generation with real-time notifications\n\n"
            "## Notifications\n"
            "Connect to `/ws/repairplans` (WebSocket) or fall back to "
            "`/sse/repairplans` (Server-Sent Events) to receive "
            "`repairplan:created` events."
        ),
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add structured request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ConflictError, conflict_handler)

    # Register routers
    app.include_router(health_router)
    app.include_router(inspections_router)
    app.include_router(findings_router)
    app.include_router(repair_plans_router)
    app.include_router(events_router)

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint returning API info."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "description": "Wind-turbine inspection and repair planning API",
            "docs": "/docs",
            "websocket": "/ws/repairplans",
            "sse": "/sse/repairplans",
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bladewatch.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
