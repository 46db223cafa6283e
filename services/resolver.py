# ============================================================================
# JOB RESOLVER
# ============================================================================
# STATUS: Service - Identifier to live object resolution
# PURPOSE: Resolve jobs, tasks and attempts against the job registry
# CREATED: 09 OCT 2026
# ============================================================================
"""
Job Resolver

Turns identifiers into live handles, one level at a time:

    JobId          -> Job          registry.get_full()
    (Job, TaskId)  -> Task         job.get_task(), same-job check
    (Task, AttemptId) -> TaskAttempt   task.get_attempt(), same-task check

Each step raises NotFoundError and short-circuits the next. The *_string
variants parse first, so a caller sees MalformedError before any lookup.

Nothing is cached: every request resolves against the live registry.
"""

import logging
from typing import List

from core.errors import NotFoundError
from core.ids import JobId, TaskAttemptId, TaskId, parse_attempt_id, parse_job_id, parse_task_id
from core.models import Job, Task, TaskAttempt
from repositories import JobRegistry

logger = logging.getLogger(__name__)


class JobResolver:
    """Resolves identifiers against a JobRegistry."""

    def __init__(self, registry: JobRegistry):
        self.registry = registry

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def list_jobs(self) -> List[Job]:
        """
        Full views of every listed job.

        Listed entries with no full view yet are skipped.
        """
        jobs = []
        for job_id, _summary in self.registry.list_partial():
            job = self.registry.get_full(job_id)
            if job is None:
                logger.debug(f"Skipping {job_id}: no full view available")
                continue
            jobs.append(job)
        return jobs

    def resolve_job(self, job_id: JobId) -> Job:
        """
        Full view of one job.

        Raises:
            NotFoundError if the registry has no full view for it
        """
        job = self.registry.get_full(job_id)
        if job is None:
            raise NotFoundError(f"job, {job_id}, is not found", job_id=str(job_id))
        return job

    def resolve_job_string(self, job_id: str) -> Job:
        """
        Raises:
            MalformedError if the id does not parse
            NotFoundError if the job does not exist
        """
        return self.resolve_job(parse_job_id(job_id))

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def resolve_task(self, job: Job, task_id: TaskId) -> Task:
        """
        A task of the given job.

        A task id naming a different job is not found here, even when
        that other job has such a task.

        Raises:
            NotFoundError
        """
        task = None
        if task_id.job_id == job.job_id:
            task = job.get_task(task_id)
        if task is None:
            raise NotFoundError(
                f"task not found with id {task_id}", job_id=str(job.job_id)
            )
        return task

    def resolve_task_string(self, job: Job, task_id: str) -> Task:
        return self.resolve_task(job, parse_task_id(task_id))

    # ------------------------------------------------------------------
    # Attempts
    # ------------------------------------------------------------------

    def resolve_attempt(self, task: Task, attempt_id: TaskAttemptId) -> TaskAttempt:
        """
        An attempt of the given task.

        Raises:
            NotFoundError
        """
        attempt = None
        if attempt_id.task_id == task.task_id:
            attempt = task.get_attempt(attempt_id)
        if attempt is None:
            raise NotFoundError(
                f"task attempt not found with id {attempt_id}",
                job_id=str(task.task_id.job_id),
            )
        return attempt

    def resolve_attempt_string(self, task: Task, attempt_id: str) -> TaskAttempt:
        return self.resolve_attempt(task, parse_attempt_id(attempt_id))


__all__ = ["JobResolver"]
