# ============================================================================
# CONTROL ROUTES
# ============================================================================
# STATUS: Core - FastAPI mutation endpoints
# PURPOSE: Plain-text administrative commands against running jobs
# CREATED: 10 OCT 2026
# ============================================================================
"""
Control Routes

    /jobs/{jobid}/setnumreducers?nreducers=N      -> "SUCCEEDED"
    /jobs/{jobid}/rerunmaptask?id=N               -> "<jobid>:<STATUS>"
    /jobs/{jobid}/rerunmaptask/strict?id=N        -> "<jobid>:SUCCEEDED"
    /jobs/{jobid}/workbuilderport?port=N          -> "SUCCEEDED"

Each accepts GET (existing clients) and POST. Responses are text/plain.
These endpoints do not check view permission; the caller identity is
only recorded in the audit log.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from core.config import ControlDefaults
from core.errors import NotFoundError
from services import ControlService
from .routes import get_remote_user
from .schemas import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

_control_service: Optional[ControlService] = None
_control_defaults: ControlDefaults = ControlDefaults()


def set_control_services(control_service: ControlService, control_defaults: Optional[ControlDefaults] = None):
    """Set service instances for dependency injection."""
    global _control_service, _control_defaults
    _control_service = control_service
    _control_defaults = control_defaults or control_service.defaults


def get_control_service() -> ControlService:
    if _control_service is None:
        raise HTTPException(500, "Control service not initialized")
    return _control_service


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.api_route(
    "/jobs/{job_id}/setnumreducers",
    methods=["GET", "POST"],
    response_class=PlainTextResponse,
    responses=ERROR_RESPONSES,
    tags=["Control"],
)
def set_num_reducers(
    job_id: str,
    nreducers: int = Query(..., description="New total reduce count"),
    service: ControlService = Depends(get_control_service),
    caller: Optional[str] = Depends(get_remote_user),
):
    """
    Resize the reduce phase.

    Fails with 400 when fewer reduces are requested than are running.
    The new count is handed to the scheduler; SUCCEEDED means accepted.
    """
    return service.set_num_reducers(job_id, nreducers, caller=caller)


@router.api_route(
    "/jobs/{job_id}/rerunmaptask",
    methods=["GET", "POST"],
    response_class=PlainTextResponse,
    responses=ERROR_RESPONSES,
    tags=["Control"],
)
def rerun_map_task(
    job_id: str,
    id: int = Query(..., description="Index of the map task"),
    service: ControlService = Depends(get_control_service),
    caller: Optional[str] = Depends(get_remote_user),
):
    """
    Fail attempt 0 of a map task so it is scheduled again.

    Returns "<jobid>:SUCCEEDED", "<jobid>:NOTFOUND" or "<jobid>:FAILED".
    Only an out-of-range index is reported as an HTTP error.
    """
    return service.rerun_map_task(job_id, id, caller=caller)


@router.api_route(
    "/jobs/{job_id}/rerunmaptask/strict",
    methods=["GET", "POST"],
    response_class=PlainTextResponse,
    responses=ERROR_RESPONSES,
    tags=["Control"],
)
def rerun_map_task_strict(
    job_id: str,
    id: int = Query(..., description="Index of the map task"),
    service: ControlService = Depends(get_control_service),
    caller: Optional[str] = Depends(get_remote_user),
):
    """
    Same as rerunmaptask, but every failure is an HTTP error.

    A missing job, task or attempt is 404; a bad index is 400.
    """
    if not _control_defaults.strict_rerun_enabled:
        raise NotFoundError("Strict rerun is disabled", job_id=job_id)
    return service.rerun_map_task_strict(job_id, id, caller=caller)


@router.api_route(
    "/jobs/{job_id}/workbuilderport",
    methods=["GET", "POST"],
    response_class=PlainTextResponse,
    responses=ERROR_RESPONSES,
    tags=["Control"],
)
def set_work_builder_port(
    job_id: str,
    port: int = Query(..., ge=0, le=65535, description="Callback port"),
    service: ControlService = Depends(get_control_service),
    caller: Optional[str] = Depends(get_remote_user),
):
    """Record the port the job's work builder listens on."""
    return service.set_callback_port(job_id, port, caller=caller)
