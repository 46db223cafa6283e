# ============================================================================
# TASK AND ATTEMPT HANDLES
# ============================================================================
# STATUS: Core model - Boundary contract with the scheduler
# PURPOSE: Read-only task/attempt views plus the attempt control capability
# CREATED: 07 OCT 2026
# EXPORTS: Task, TaskAttempt, MutableTask, MutableTaskAttempt
# DEPENDENCIES: abc, core.ids, core.contracts, core.models.counters
# ============================================================================
"""
Task and Attempt Handles

The scheduler owns these objects and mutates them concurrently with the
API reading them. Each property read is individually consistent; nothing
guarantees two reads describe the same instant.

Read views (Task, TaskAttempt) are what the read endpoints see. The
Mutable* variants add the one capability the control endpoints need -
handing an event to an attempt - and are only reachable through a
ControlRegistry.

Times are epoch milliseconds, 0 meaning "not set".
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from core.contracts import TaskAttemptState, TaskState, TaskType
from core.ids import TaskAttemptId, TaskId
from core.models.counters import Counters
from core.models.events import TaskAttemptEvent


class TaskAttempt(ABC):
    """Read-only view of one execution attempt of a task."""

    @property
    @abstractmethod
    def attempt_id(self) -> TaskAttemptId: ...

    @property
    @abstractmethod
    def state(self) -> TaskAttemptState: ...

    @property
    @abstractmethod
    def progress(self) -> float:
        """Fraction complete, 0.0 - 1.0."""

    @property
    @abstractmethod
    def start_time(self) -> int: ...

    @property
    @abstractmethod
    def finish_time(self) -> int: ...

    @property
    @abstractmethod
    def shuffle_finish_time(self) -> int:
        """Reduce attempts only; 0 for maps."""

    @property
    @abstractmethod
    def sort_finish_time(self) -> int:
        """End of the merge phase. Reduce attempts only; 0 for maps."""

    @property
    @abstractmethod
    def node_http_address(self) -> Optional[str]: ...

    @property
    @abstractmethod
    def node_rack_name(self) -> Optional[str]: ...

    @property
    @abstractmethod
    def assigned_container_id(self) -> Optional[str]: ...

    @property
    @abstractmethod
    def diagnostics(self) -> List[str]: ...

    @property
    @abstractmethod
    def status(self) -> str:
        """Free-form status line reported by the attempt."""

    @abstractmethod
    def get_counters(self) -> Counters: ...


class MutableTaskAttempt(TaskAttempt):
    """Attempt handle that accepts events from the control endpoints."""

    @abstractmethod
    def handle(self, event: TaskAttemptEvent) -> None: ...


class Task(ABC):
    """Read-only view of one map or reduce task."""

    @property
    @abstractmethod
    def task_id(self) -> TaskId: ...

    @property
    def task_type(self) -> TaskType:
        return self.task_id.task_type

    @property
    @abstractmethod
    def state(self) -> TaskState: ...

    @property
    @abstractmethod
    def progress(self) -> float: ...

    @property
    @abstractmethod
    def start_time(self) -> int: ...

    @property
    @abstractmethod
    def finish_time(self) -> int: ...

    @property
    @abstractmethod
    def status(self) -> str: ...

    @property
    @abstractmethod
    def successful_attempt(self) -> Optional[TaskAttemptId]: ...

    @property
    @abstractmethod
    def attempts(self) -> Dict[TaskAttemptId, TaskAttempt]:
        """Snapshot of the attempts keyed by id."""

    @abstractmethod
    def get_attempt(self, attempt_id: TaskAttemptId) -> Optional[TaskAttempt]: ...

    @abstractmethod
    def get_counters(self) -> Counters: ...


class MutableTask(Task):
    """Task handle exposing the control capability of its attempts."""

    @abstractmethod
    def get_mutable_attempt(self, attempt_id: TaskAttemptId) -> Optional[MutableTaskAttempt]: ...


__all__ = ["Task", "TaskAttempt", "MutableTask", "MutableTaskAttempt"]
