# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums shared across the API
# PURPOSE: Lifecycle states, task types, ACL kinds and control tokens
# CREATED: 06 OCT 2026
# EXPORTS: JobState, TaskState, TaskAttemptState, TaskType, JobACL,
#          ControlStatus, AckMode
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the AM web services.

The lifecycle enums mirror the states reported by the scheduler that owns
the job model. This API never transitions them; it only reads and reports.
"""

from enum import Enum


# ============================================================================
# LIFECYCLE ENUMS
# ============================================================================

class JobState(str, Enum):
    """
    Job lifecycle states as reported by the scheduler.

    State transitions (owned by the scheduler):
        NEW -> INITED -> SETUP -> RUNNING -> COMMITTING -> SUCCEEDED
                                         -> FAIL_ABORT -> FAILED
                                         -> KILL_WAIT -> KILLED
    """
    NEW = "NEW"
    INITED = "INITED"
    SETUP = "SETUP"
    RUNNING = "RUNNING"
    COMMITTING = "COMMITTING"
    SUCCEEDED = "SUCCEEDED"
    FAIL_ABORT = "FAIL_ABORT"
    FAILED = "FAILED"
    KILL_WAIT = "KILL_WAIT"
    KILLED = "KILLED"
    ERROR = "ERROR"

    def is_terminal(self) -> bool:
        """Check if this is a terminal state (no further transitions)."""
        return self in (JobState.SUCCEEDED, JobState.FAILED, JobState.KILLED, JobState.ERROR)


class TaskState(str, Enum):
    """Task lifecycle states."""
    NEW = "NEW"
    SCHEDULED = "SCHEDULED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    KILL_WAIT = "KILL_WAIT"
    KILLED = "KILLED"

    def is_pending(self) -> bool:
        return self in (TaskState.NEW, TaskState.SCHEDULED)


class TaskAttemptState(str, Enum):
    """
    Task attempt lifecycle states.

    Grouped for reporting:
        new        - NEW, UNASSIGNED, ASSIGNED
        running    - RUNNING, COMMIT_PENDING, SUCCESS_CONTAINER_CLEANUP
        successful - SUCCEEDED
        failed     - FAIL_CONTAINER_CLEANUP, FAIL_TASK_CLEANUP, FAILED
        killed     - KILL_CONTAINER_CLEANUP, KILL_TASK_CLEANUP, KILLED
    """
    NEW = "NEW"
    UNASSIGNED = "UNASSIGNED"
    ASSIGNED = "ASSIGNED"
    RUNNING = "RUNNING"
    COMMIT_PENDING = "COMMIT_PENDING"
    SUCCESS_CONTAINER_CLEANUP = "SUCCESS_CONTAINER_CLEANUP"
    SUCCEEDED = "SUCCEEDED"
    FAIL_CONTAINER_CLEANUP = "FAIL_CONTAINER_CLEANUP"
    FAIL_TASK_CLEANUP = "FAIL_TASK_CLEANUP"
    FAILED = "FAILED"
    KILL_CONTAINER_CLEANUP = "KILL_CONTAINER_CLEANUP"
    KILL_TASK_CLEANUP = "KILL_TASK_CLEANUP"
    KILLED = "KILLED"

    def is_new(self) -> bool:
        return self in (TaskAttemptState.NEW, TaskAttemptState.UNASSIGNED, TaskAttemptState.ASSIGNED)

    def is_running(self) -> bool:
        return self in (
            TaskAttemptState.RUNNING,
            TaskAttemptState.COMMIT_PENDING,
            TaskAttemptState.SUCCESS_CONTAINER_CLEANUP,
        )

    def is_failed(self) -> bool:
        return self in (
            TaskAttemptState.FAIL_CONTAINER_CLEANUP,
            TaskAttemptState.FAIL_TASK_CLEANUP,
            TaskAttemptState.FAILED,
        )

    def is_killed(self) -> bool:
        return self in (
            TaskAttemptState.KILL_CONTAINER_CLEANUP,
            TaskAttemptState.KILL_TASK_CLEANUP,
            TaskAttemptState.KILLED,
        )


class TaskType(str, Enum):
    """
    Task type discriminant.

    The single-letter symbol is what appears inside task and attempt
    identifiers and in the ?type= filter of the tasks collection.
    """
    MAP = "MAP"
    REDUCE = "REDUCE"

    @property
    def symbol(self) -> str:
        return "m" if self is TaskType.MAP else "r"

    @classmethod
    def from_symbol(cls, symbol: str) -> "TaskType":
        """
        Map "m" / "r" to a task type.

        Raises:
            ValueError if the symbol is neither
        """
        if symbol == "m":
            return cls.MAP
        if symbol == "r":
            return cls.REDUCE
        raise ValueError(f"Unknown task symbol: {symbol!r}")


# ============================================================================
# ACCESS CONTROL
# ============================================================================

class JobACL(str, Enum):
    """Kinds of per-job permission."""
    VIEW_JOB = "mapreduce.job.acl-view-job"
    MODIFY_JOB = "mapreduce.job.acl-modify-job"


# ============================================================================
# CONTROL COMMANDS
# ============================================================================

class ControlStatus(str, Enum):
    """Status tokens returned by the plain-text control endpoints."""
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    NOTFOUND = "NOTFOUND"


class AckMode(str, Enum):
    """
    How a control command takes effect.

    SYNC  - applied directly to the job handle before the response
    ASYNC - dispatched to the scheduler as an event; the response only
            acknowledges acceptance
    """
    SYNC = "sync"
    ASYNC = "async"


__all__ = [
    "JobState",
    "TaskState",
    "TaskAttemptState",
    "TaskType",
    "JobACL",
    "ControlStatus",
    "AckMode",
]
