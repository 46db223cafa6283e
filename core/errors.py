# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# STATUS: Foundation - Caller-facing failure kinds
# PURPOSE: One exception per outward error kind, each carrying its HTTP status
# CREATED: 06 OCT 2026
# EXPORTS: WebServiceError, MalformedError, NotFoundError, UnauthorizedError,
#          BadRequestError
# ============================================================================
"""
Error Taxonomy

Every failure the read and control paths model is one of four kinds.
All four are caller errors - none is transient, none is retried.

    MalformedError    -> 400  identifier or parameter could not be parsed
    NotFoundError     -> 404  job/task/attempt (or derived resource) missing
    UnauthorizedError -> 401  caller lacks view permission on the job
    BadRequestError   -> 400  semantically invalid mutation precondition

Anything else raised on the read path is a defect, not a modeled outcome.
The HTTP mapping is registered by api.errors.register_exception_handlers.
"""

from typing import Optional


class WebServiceError(Exception):
    """Base exception for all modeled failures."""

    status_code: int = 500
    error: str = "internal_error"

    def __init__(self, message: str, job_id: Optional[str] = None):
        self.message = message
        self.job_id = job_id
        super().__init__(message)


class MalformedError(WebServiceError):
    """Raised when an identifier or filter value does not parse."""

    status_code = 400
    error = "malformed"

    def __init__(self, message: str, value: Optional[str] = None, job_id: Optional[str] = None):
        self.value = value
        super().__init__(message, job_id=job_id)


class NotFoundError(WebServiceError):
    """Raised when a job, task, attempt or derived resource is unavailable."""

    status_code = 404
    error = "not_found"


class UnauthorizedError(WebServiceError):
    """Raised when the caller may not view an existing job."""

    status_code = 401
    error = "unauthorized"

    def __init__(self, message: str, caller: Optional[str] = None, job_id: Optional[str] = None):
        self.caller = caller
        super().__init__(message, job_id=job_id)


class BadRequestError(WebServiceError):
    """Raised when a mutation precondition is violated."""

    status_code = 400
    error = "bad_request"


__all__ = [
    "WebServiceError",
    "MalformedError",
    "NotFoundError",
    "UnauthorizedError",
    "BadRequestError",
]
