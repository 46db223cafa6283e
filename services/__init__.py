# ============================================================================
# SERVICES MODULE
# ============================================================================
# STATUS: Core - Business logic layer
# PURPOSE: Resolution, authorization and job control services
# CREATED: 09 OCT 2026
# ============================================================================
"""
Services Module

Services sit between the HTTP routes and the job registry.

Usage:
    from services import JobResolver, AccessGuard

    resolver = JobResolver(registry)
    job = resolver.resolve_job_string("job_1326232085508_0004")
    AccessGuard().enforce_view(job, caller="alice")
"""

from .access import AccessGuard
from .control_service import (
    ControlCommand,
    ControlService,
    RerunMapTaskCommand,
    SetCallbackPortCommand,
    SetNumReducesCommand,
)
from .resolver import JobResolver

__all__ = [
    "AccessGuard",
    "ControlCommand",
    "ControlService",
    "JobResolver",
    "RerunMapTaskCommand",
    "SetCallbackPortCommand",
    "SetNumReducesCommand",
]
