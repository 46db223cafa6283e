# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export contracts, identifiers, errors and model handles
# CREATED: 06 OCT 2026
# ============================================================================

from core.contracts import AckMode, ControlStatus, JobACL, JobState, TaskAttemptState, TaskState, TaskType
from core.errors import BadRequestError, MalformedError, NotFoundError, UnauthorizedError, WebServiceError
from core.ids import JobId, TaskAttemptId, TaskId, parse_attempt_id, parse_job_id, parse_task_id

__all__ = [
    # Enums
    "AckMode",
    "ControlStatus",
    "JobACL",
    "JobState",
    "TaskAttemptState",
    "TaskState",
    "TaskType",
    # Errors
    "WebServiceError",
    "MalformedError",
    "NotFoundError",
    "UnauthorizedError",
    "BadRequestError",
    # Identifiers
    "JobId",
    "TaskId",
    "TaskAttemptId",
    "parse_job_id",
    "parse_task_id",
    "parse_attempt_id",
]
