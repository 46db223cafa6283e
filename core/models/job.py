# ============================================================================
# JOB HANDLES
# ============================================================================
# STATUS: Core model - Boundary contract with the scheduler
# PURPOSE: Read-only job view plus the job control capability
# CREATED: 07 OCT 2026
# EXPORTS: Job, MutableJob, JobSummary
# DEPENDENCIES: abc, pydantic, core.ids, core.contracts, core.models
# ============================================================================
"""
Job Handles

A Job is a live object owned by the scheduler. The API holds one only for
the duration of a request and never caches it.

Job        - what every read endpoint sees
MutableJob - Job plus the event channel and the callback-port setter;
             handed out only by ControlRegistry.get_mutable() so the
             control endpoints' dependency on it is explicit
JobSummary - the partial record returned by bulk listing; never served
             as if it were a resolved job
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from pydantic import BaseModel

from core.contracts import JobACL, JobState, TaskType
from core.ids import JobId, TaskId
from core.models.acl import AccessControlList
from core.models.application import AMInfo
from core.models.counters import Counters
from core.models.events import EventHandler
from core.models.task import MutableTask, Task


class JobSummary(BaseModel):
    """Partial job record from bulk listing."""
    job_id: JobId
    name: str = ""
    user: str = ""
    state: JobState = JobState.NEW


class Job(ABC):
    """Read-only view of a job."""

    @property
    @abstractmethod
    def job_id(self) -> JobId: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def user(self) -> str:
        """Owner of the job."""

    @property
    @abstractmethod
    def state(self) -> JobState: ...

    @property
    @abstractmethod
    def start_time(self) -> int: ...

    @property
    @abstractmethod
    def finish_time(self) -> int: ...

    @property
    @abstractmethod
    def total_maps(self) -> int: ...

    @property
    @abstractmethod
    def total_reduces(self) -> int: ...

    @property
    @abstractmethod
    def completed_maps(self) -> int: ...

    @property
    @abstractmethod
    def completed_reduces(self) -> int: ...

    @property
    @abstractmethod
    def running_reduces(self) -> int:
        """Reduce tasks currently in flight."""

    @property
    @abstractmethod
    def map_progress(self) -> float: ...

    @property
    @abstractmethod
    def reduce_progress(self) -> float: ...

    @property
    @abstractmethod
    def is_uber(self) -> bool: ...

    @property
    @abstractmethod
    def diagnostics(self) -> List[str]: ...

    @property
    @abstractmethod
    def acls(self) -> Dict[JobACL, AccessControlList]: ...

    @property
    @abstractmethod
    def am_infos(self) -> List[AMInfo]:
        """Application master attempts, oldest first."""

    @property
    @abstractmethod
    def tasks(self) -> Dict[TaskId, Task]:
        """Snapshot of the tasks keyed by id."""

    @abstractmethod
    def get_task(self, task_id: TaskId) -> Optional[Task]: ...

    @abstractmethod
    def get_all_counters(self) -> Counters: ...

    @property
    @abstractmethod
    def conf_path(self) -> Optional[str]: ...

    @abstractmethod
    def load_configuration(self) -> Dict[str, str]:
        """
        Load the job configuration.

        Raises:
            OSError if the configuration cannot be loaded
        """

    def check_access(self, user: str, acl: JobACL) -> bool:
        """
        Check whether a user holds an ACL permission on this job.

        The owner always does; everyone else needs an ACL entry.
        """
        if user == self.user:
            return True
        entry = self.acls.get(acl)
        return entry is not None and entry.is_user_allowed(user)

    def tasks_of_type(self, task_type: Optional[TaskType] = None) -> List[Task]:
        """Tasks ordered by id, optionally restricted to one type."""
        return [
            task for task_id, task in sorted(self.tasks.items())
            if task_type is None or task.task_type == task_type
        ]


class MutableJob(Job):
    """Job handle with the control capabilities."""

    @property
    @abstractmethod
    def event_handler(self) -> EventHandler: ...

    @abstractmethod
    def set_callback_port(self, port: int) -> None: ...

    @abstractmethod
    def get_mutable_task(self, task_id: TaskId) -> Optional[MutableTask]: ...


__all__ = ["Job", "MutableJob", "JobSummary"]
