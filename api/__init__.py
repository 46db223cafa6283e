# ============================================================================
# API MODULE
# ============================================================================
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for job status and control
# CREATED: 10 OCT 2026
# ============================================================================
"""
API Module

FastAPI routers for the AM web services: read endpoints, control
endpoints and the error mapping shared by both.
"""

from .routes import router, set_services
from .control_routes import router as control_router, set_control_services
from .errors import register_exception_handlers
from .schemas import (
    AppInfo,
    ErrorResponse,
    JobInfo,
    TaskAttemptInfo,
    TaskInfo,
)

__all__ = [
    "router",
    "control_router",
    "set_services",
    "set_control_services",
    "register_exception_handlers",
    "AppInfo",
    "ErrorResponse",
    "JobInfo",
    "TaskAttemptInfo",
    "TaskInfo",
]
