# ============================================================================
# AM WEB SERVICES - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Wire registry, services and routers into the HTTP app
# CREATED: 10 OCT 2026
# ============================================================================
"""
AM Web Services Main Application

FastAPI application that:
1. Serves job, task and attempt status under /ws/v1/mapreduce
2. Accepts the administrative control commands
3. Maps modeled failures to JSON error responses

The scheduler embedding this app passes its own registry to create_app().
Run standalone, the app serves an empty in-memory registry.

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from __version__ import __version__, API_VERSION, BUILD_DATE, CODENAME
from api import (
    control_router,
    register_exception_handlers,
    router,
    set_control_services,
    set_services,
)
from core.config import Defaults, get_defaults
from repositories import ControlRegistry, InMemoryJobRegistry
from services import AccessGuard, ControlService, JobResolver

# Configure logging using our structured logging system
from core.logging import configure_logging

configure_logging(
    level=get_defaults().server.log_level,
    json_output=get_defaults().server.json_logs,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {CODENAME} v{__version__} (Build {BUILD_DATE})")
    yield
    logger.info(f"{CODENAME} stopped")


def create_app(
    registry: Optional[ControlRegistry] = None,
    defaults: Optional[Defaults] = None,
) -> FastAPI:
    """
    Build the application around a job registry.

    Args:
        registry: Registry of the scheduler's jobs (empty in-memory if None)
        defaults: Configuration (environment defaults if None)
    """
    if registry is None:
        registry = InMemoryJobRegistry()
    if defaults is None:
        defaults = get_defaults()

    set_services(
        resolver=JobResolver(registry),
        access_guard=AccessGuard(require_authentication=defaults.access.require_authentication),
        access_defaults=defaults.access,
    )
    set_control_services(
        control_service=ControlService(registry, defaults.control),
        control_defaults=defaults.control,
    )

    app = FastAPI(
        title=CODENAME,
        description="Status and control API for a running MapReduce application master",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    prefix = defaults.server.api_prefix
    app.include_router(router, prefix=prefix)
    app.include_router(control_router, prefix=prefix)

    @app.get("/livez", tags=["Health"])
    async def livez():
        """Liveness probe."""
        return {"status": "ok"}

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": CODENAME,
            "version": __version__,
            "api_version": API_VERSION,
            "build_date": BUILD_DATE,
            "status": "running",
            "api": prefix,
            "docs": "/docs",
        }

    return app


# Create FastAPI app
app = create_app()


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    server = get_defaults().server

    uvicorn.run(
        "main:app",
        host=server.host,
        port=server.port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
