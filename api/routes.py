# ============================================================================
# API ROUTES
# ============================================================================
# STATUS: Core - FastAPI read endpoints
# PURPOSE: Jobs, tasks, attempts, counters and configuration views
# CREATED: 10 OCT 2026
# ============================================================================
"""
API Routes

Read endpoints of the AM web services, mounted under /ws/v1/mapreduce.

Every handler follows the same path:

    parse identifier -> resolve ancestors -> enforce view -> project

The job listing is the exception: it never rejects, it annotates each job
with whether the caller can view it. The AM attempt history and the
status line only require the job to resolve.

Handlers are plain functions: registry reads take locks and the
configuration may come from disk, so FastAPI runs them in its threadpool.
Each one opens a log scope with the identifiers from the path.
"""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from core.config import AccessDefaults
from core.errors import BadRequestError, MalformedError, NotFoundError
from core.ids import parse_task_type
from core.logging import log_context
from services import AccessGuard, JobResolver
from .projections import (
    project_am_attempt,
    project_app,
    project_attempt,
    project_attempt_counters,
    project_conf,
    project_job,
    project_job_counters,
    project_task,
    project_task_counters,
)
from .schemas import (
    AMAttemptsInfo,
    AppInfo,
    AttemptCounterInfo,
    ConfInfo,
    ErrorResponse,
    JobCounterInfo,
    JobInfo,
    JobsInfo,
    ReduceTaskAttemptInfo,
    TaskAttemptInfo,
    TaskAttemptsInfo,
    TaskCounterInfo,
    TaskInfo,
    TasksInfo,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# These will be set by the main app at startup

_resolver: Optional[JobResolver] = None
_access_guard: Optional[AccessGuard] = None
_access_defaults: AccessDefaults = AccessDefaults()


def set_services(resolver: JobResolver, access_guard: AccessGuard, access_defaults: Optional[AccessDefaults] = None):
    """Set service instances for dependency injection."""
    global _resolver, _access_guard, _access_defaults
    _resolver = resolver
    _access_guard = access_guard
    _access_defaults = access_defaults or AccessDefaults()


def get_resolver() -> JobResolver:
    if _resolver is None:
        raise HTTPException(500, "Services not initialized")
    return _resolver


def get_access_guard() -> AccessGuard:
    if _access_guard is None:
        raise HTTPException(500, "Services not initialized")
    return _access_guard


def get_remote_user(request: Request) -> Optional[str]:
    """
    Caller identity established by the transport layer.

    Read from the configured header, falling back to ?user.name= when
    that is allowed. None means an unauthenticated request.
    """
    user = request.headers.get(_access_defaults.remote_user_header)
    if not user and _access_defaults.allow_user_name_param:
        user = request.query_params.get("user.name")
    return user or None


# ============================================================================
# APPLICATION
# ============================================================================

@router.get("/", response_model=AppInfo, tags=["Application"])
@router.get("/info", response_model=AppInfo, tags=["Application"])
def get_app_info(resolver: JobResolver = Depends(get_resolver)):
    """Application master information."""
    return project_app(resolver.registry.get_application())


# ============================================================================
# JOBS
# ============================================================================

@router.get("/jobs", response_model=JobsInfo, tags=["Jobs"])
def list_jobs(
    resolver: JobResolver = Depends(get_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    caller: Optional[str] = Depends(get_remote_user),
):
    """
    List all jobs.

    Jobs the caller cannot view are still listed, with has_access false
    and no task breakdown or ACLs.
    """
    with log_context(caller=caller, operation="jobs"):
        jobs = [project_job(job, guard.can_view(job, caller)) for job in resolver.list_jobs()]
    return JobsInfo(jobs=jobs)


@router.get("/jobs/{job_id}", response_model=JobInfo, responses=ERROR_RESPONSES, tags=["Jobs"])
def get_job(
    job_id: str,
    resolver: JobResolver = Depends(get_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    caller: Optional[str] = Depends(get_remote_user),
):
    """Get one job."""
    with log_context(job_id=job_id, caller=caller):
        job = resolver.resolve_job_string(job_id)
        guard.enforce_view(job, caller)
        return project_job(job, has_access=True)


@router.get("/jobs/{job_id}/jobattempts", response_model=AMAttemptsInfo, responses=ERROR_RESPONSES, tags=["Jobs"])
def get_job_attempts(
    job_id: str,
    resolver: JobResolver = Depends(get_resolver),
):
    """Application master attempts of a job, oldest first."""
    with log_context(job_id=job_id):
        job = resolver.resolve_job_string(job_id)
        user = job.user
        return AMAttemptsInfo(job_attempts=[project_am_attempt(am, user) for am in job.am_infos])


@router.get("/jobs/{job_id}/counters", response_model=JobCounterInfo, responses=ERROR_RESPONSES, tags=["Jobs"])
def get_job_counters(
    job_id: str,
    resolver: JobResolver = Depends(get_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    caller: Optional[str] = Depends(get_remote_user),
):
    """Job counters with map, reduce and total values."""
    with log_context(job_id=job_id, caller=caller):
        job = resolver.resolve_job_string(job_id)
        guard.enforce_view(job, caller)
        return project_job_counters(job)


@router.get("/jobs/{job_id}/conf", response_model=ConfInfo, responses=ERROR_RESPONSES, tags=["Jobs"])
def get_job_conf(
    job_id: str,
    resolver: JobResolver = Depends(get_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    caller: Optional[str] = Depends(get_remote_user),
):
    """
    Job configuration.

    A configuration that cannot be loaded is reported as not found.
    """
    with log_context(job_id=job_id, caller=caller):
        job = resolver.resolve_job_string(job_id)
        guard.enforce_view(job, caller)
        try:
            properties = job.load_configuration()
        except OSError as e:
            logger.warning(f"Configuration of {job.job_id} unavailable: {e}")
            raise NotFoundError(str(e), job_id=str(job.job_id)) from e
        return project_conf(job, properties)


@router.get("/jobs/{job_id}/numunfinishedmaps", response_class=PlainTextResponse, tags=["Jobs"])
def get_num_unfinished_maps(
    job_id: str,
    resolver: JobResolver = Depends(get_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    caller: Optional[str] = Depends(get_remote_user),
):
    """Plain-text "<jobid>:<maps not yet completed>"."""
    with log_context(job_id=job_id, caller=caller):
        job = resolver.resolve_job_string(job_id)
        guard.enforce_view(job, caller)
        return f"{job.job_id}:{job.total_maps - job.completed_maps}"


@router.get("/jobs/{job_id}/status", response_class=PlainTextResponse, tags=["Jobs"])
def get_job_status(
    job_id: str,
    resolver: JobResolver = Depends(get_resolver),
):
    """Plain-text "<jobid> : <STATE>"."""
    with log_context(job_id=job_id):
        job = resolver.resolve_job_string(job_id)
        return f"{job.job_id} : {job.state.value}"


# ============================================================================
# TASKS
# ============================================================================

@router.get("/jobs/{job_id}/tasks", response_model=TasksInfo, responses=ERROR_RESPONSES, tags=["Tasks"])
def list_tasks(
    job_id: str,
    task_type: Optional[str] = Query(None, alias="type", description="m or r"),
    resolver: JobResolver = Depends(get_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    caller: Optional[str] = Depends(get_remote_user),
):
    """
    List tasks of a job, optionally only maps (m) or reduces (r).

    An empty type is the same as no filter.
    """
    with log_context(job_id=job_id, caller=caller):
        job = resolver.resolve_job_string(job_id)
        guard.enforce_view(job, caller)

        wanted = None
        if task_type:
            try:
                wanted = parse_task_type(task_type)
            except MalformedError as e:
                raise BadRequestError(e.message, job_id=str(job.job_id)) from e

        return TasksInfo(tasks=[project_task(task) for task in job.tasks_of_type(wanted)])


@router.get("/jobs/{job_id}/tasks/{task_id}", response_model=TaskInfo, responses=ERROR_RESPONSES, tags=["Tasks"])
def get_task(
    job_id: str,
    task_id: str,
    resolver: JobResolver = Depends(get_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    caller: Optional[str] = Depends(get_remote_user),
):
    """Get one task."""
    with log_context(job_id=job_id, task_id=task_id, caller=caller):
        job = resolver.resolve_job_string(job_id)
        guard.enforce_view(job, caller)
        return project_task(resolver.resolve_task_string(job, task_id))


@router.get(
    "/jobs/{job_id}/tasks/{task_id}/counters",
    response_model=TaskCounterInfo,
    responses=ERROR_RESPONSES,
    tags=["Tasks"],
)
def get_task_counters(
    job_id: str,
    task_id: str,
    resolver: JobResolver = Depends(get_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    caller: Optional[str] = Depends(get_remote_user),
):
    """Counters of one task."""
    with log_context(job_id=job_id, task_id=task_id, caller=caller):
        job = resolver.resolve_job_string(job_id)
        guard.enforce_view(job, caller)
        return project_task_counters(resolver.resolve_task_string(job, task_id))


# ============================================================================
# ATTEMPTS
# ============================================================================

@router.get(
    "/jobs/{job_id}/tasks/{task_id}/attempts",
    response_model=TaskAttemptsInfo,
    responses=ERROR_RESPONSES,
    tags=["Attempts"],
)
def list_attempts(
    job_id: str,
    task_id: str,
    resolver: JobResolver = Depends(get_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    caller: Optional[str] = Depends(get_remote_user),
):
    """
    List attempts of a task.

    Reduce attempts carry the shuffle, merge and reduce phase timings.
    """
    with log_context(job_id=job_id, task_id=task_id, caller=caller):
        job = resolver.resolve_job_string(job_id)
        guard.enforce_view(job, caller)
        task = resolver.resolve_task_string(job, task_id)
        task_type = task.task_type
        attempts: List[TaskAttemptInfo] = [
            project_attempt(attempt, task_type)
            for _attempt_id, attempt in sorted(task.attempts.items())
        ]
        return TaskAttemptsInfo(task_attempts=attempts)


@router.get(
    "/jobs/{job_id}/tasks/{task_id}/attempts/{attempt_id}",
    response_model=Union[ReduceTaskAttemptInfo, TaskAttemptInfo],
    responses=ERROR_RESPONSES,
    tags=["Attempts"],
)
def get_attempt(
    job_id: str,
    task_id: str,
    attempt_id: str,
    resolver: JobResolver = Depends(get_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    caller: Optional[str] = Depends(get_remote_user),
):
    """Get one attempt."""
    with log_context(job_id=job_id, task_id=task_id, attempt_id=attempt_id, caller=caller):
        job = resolver.resolve_job_string(job_id)
        guard.enforce_view(job, caller)
        task = resolver.resolve_task_string(job, task_id)
        attempt = resolver.resolve_attempt_string(task, attempt_id)
        return project_attempt(attempt, task.task_type)


@router.get(
    "/jobs/{job_id}/tasks/{task_id}/attempts/{attempt_id}/counters",
    response_model=AttemptCounterInfo,
    responses=ERROR_RESPONSES,
    tags=["Attempts"],
)
def get_attempt_counters(
    job_id: str,
    task_id: str,
    attempt_id: str,
    resolver: JobResolver = Depends(get_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    caller: Optional[str] = Depends(get_remote_user),
):
    """Counters of one attempt."""
    with log_context(job_id=job_id, task_id=task_id, attempt_id=attempt_id, caller=caller):
        job = resolver.resolve_job_string(job_id)
        guard.enforce_view(job, caller)
        task = resolver.resolve_task_string(job, task_id)
        attempt = resolver.resolve_attempt_string(task, attempt_id)
        return project_attempt_counters(attempt)
