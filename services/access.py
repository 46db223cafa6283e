# ============================================================================
# ACCESS GUARD
# ============================================================================
# STATUS: Service - Per-job view authorization
# PURPOSE: Decide whether a caller may view a resolved job
# CREATED: 09 OCT 2026
# ============================================================================
"""
Access Guard

Views are checked against the job's VIEW_JOB ACL, after the job has been
resolved. A request without a caller identity is allowed unless the guard
was built with require_authentication=True.

Listings use can_view() to annotate entries; single-resource endpoints
use enforce_view() and fail the whole request.
"""

import logging
from typing import Optional

from core.contracts import JobACL
from core.errors import UnauthorizedError
from core.models import Job

logger = logging.getLogger(__name__)


class AccessGuard:
    """View permission checks."""

    def __init__(self, require_authentication: bool = False):
        self.require_authentication = require_authentication

    def can_view(self, job: Job, caller: Optional[str]) -> bool:
        if not caller:
            return not self.require_authentication
        return job.check_access(caller, JobACL.VIEW_JOB)

    def enforce_view(self, job: Job, caller: Optional[str]) -> None:
        """
        Raises:
            UnauthorizedError if can_view() is False
        """
        if self.can_view(job, caller):
            return
        logger.warning(f"View of {job.job_id} denied for caller {caller!r}")
        if not caller:
            message = f"Authentication required to view job {job.job_id}"
        else:
            message = f"User {caller} is not authorized to view job {job.job_id}"
        raise UnauthorizedError(message, caller=caller, job_id=str(job.job_id))


__all__ = ["AccessGuard"]
