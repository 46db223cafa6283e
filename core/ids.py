# ============================================================================
# IDENTIFIER CODEC
# ============================================================================
# STATUS: Foundation - Job / task / attempt identifiers
# PURPOSE: Parse external identifier strings into typed values and back
# CREATED: 06 OCT 2026
# EXPORTS: JobId, TaskId, TaskAttemptId, parse_job_id, parse_task_id,
#          parse_attempt_id, parse_task_type
# DEPENDENCIES: core.contracts, core.errors
# ============================================================================
"""
Identifier Codec

Grammar (canonical form only - anything else is rejected, never guessed):

    job_<clusterTimestamp>_<jobSeq>
    task_<clusterTimestamp>_<jobSeq>_<m|r>_<taskSeq>
    attempt_<clusterTimestamp>_<jobSeq>_<m|r>_<taskSeq>_<attemptSeq>

    clusterTimestamp, attemptSeq  decimal, no leading zeros
    jobSeq                        zero-padded to 4 digits
    taskSeq                       zero-padded to 6 digits

Because only the canonical form is accepted, str(parse(s)) == s for every
string that parses, and parse(str(x)) == x for every identifier.

Parsing is pure: no lookup against live state happens here. Grammar errors
and numeric range errors are both raised as MalformedError.

Usage:
    from core.ids import parse_task_id

    task_id = parse_task_id("task_1326232085508_0004_m_000003")
    task_id.job_id          # JobId(cluster_timestamp=1326232085508, sequence=4)
    str(task_id.job_id)     # "job_1326232085508_0004"
"""

import re
from dataclasses import dataclass
from typing import Any

from core.contracts import TaskType
from core.errors import MalformedError

INT32_MAX = 2 ** 31 - 1
INT64_MAX = 2 ** 63 - 1

_TIMESTAMP = r"(0|[1-9][0-9]*)"
_JOB_SEQ = r"([0-9]{4}|[1-9][0-9]{4,})"
_TASK_SEQ = r"([0-9]{6}|[1-9][0-9]{6,})"
_ATTEMPT_SEQ = r"(0|[1-9][0-9]*)"

_JOB_RE = re.compile(rf"job_{_TIMESTAMP}_{_JOB_SEQ}")
_TASK_RE = re.compile(rf"task_{_TIMESTAMP}_{_JOB_SEQ}_([mr])_{_TASK_SEQ}")
_ATTEMPT_RE = re.compile(
    rf"attempt_{_TIMESTAMP}_{_JOB_SEQ}_([mr])_{_TASK_SEQ}_{_ATTEMPT_SEQ}"
)


# ============================================================================
# IDENTIFIER TYPES
# ============================================================================

def _check_range(name: str, value: int, upper: int) -> None:
    if not 0 <= value <= upper:
        raise ValueError(f"{name} out of range: {value}")


@dataclass(frozen=True, order=True)
class JobId:
    """Identifier of one job within a cluster incarnation."""
    cluster_timestamp: int
    sequence: int

    def __post_init__(self):
        _check_range("cluster_timestamp", self.cluster_timestamp, INT64_MAX)
        _check_range("job sequence", self.sequence, INT32_MAX)

    def __str__(self) -> str:
        return f"job_{self.cluster_timestamp}_{self.sequence:04d}"


@dataclass(frozen=True, order=True)
class TaskId:
    """
    Identifier of a task, only meaningful relative to its job.

    The owning job's identifier is embedded, so a task id can always
    be checked against the job it is being resolved in.
    """
    job_id: JobId
    task_type: TaskType
    sequence: int

    def __post_init__(self):
        _check_range("task sequence", self.sequence, INT32_MAX)

    def __str__(self) -> str:
        return (
            f"task_{self.job_id.cluster_timestamp}_{self.job_id.sequence:04d}"
            f"_{self.task_type.symbol}_{self.sequence:06d}"
        )


@dataclass(frozen=True, order=True)
class TaskAttemptId:
    """Identifier of one execution attempt, only meaningful relative to its task."""
    task_id: TaskId
    sequence: int

    def __post_init__(self):
        _check_range("attempt sequence", self.sequence, INT32_MAX)

    @property
    def job_id(self) -> JobId:
        return self.task_id.job_id

    def __str__(self) -> str:
        task = self.task_id
        return (
            f"attempt_{task.job_id.cluster_timestamp}_{task.job_id.sequence:04d}"
            f"_{task.task_type.symbol}_{task.sequence:06d}_{self.sequence}"
        )


# ============================================================================
# PARSING
# ============================================================================

def _require_string(kind: str, value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise MalformedError(f"{kind} id must be a non-empty string", value=repr(value))
    return value


def _to_int(kind: str, text: str, upper: int, original: str) -> int:
    """Convert a grammar-checked digit run, enforcing the numeric range."""
    number = int(text)
    if number > upper:
        raise MalformedError(
            f"Numeric component {text} of {kind} id {original!r} is out of range",
            value=original,
        )
    return number


def parse_job_id(value: str) -> JobId:
    """
    Parse a job identifier string.

    Raises:
        MalformedError if the string is not a canonical job id
    """
    value = _require_string("job", value)
    match = _JOB_RE.fullmatch(value)
    if match is None:
        raise MalformedError(f"Invalid job id: {value!r}", value=value)
    return JobId(
        cluster_timestamp=_to_int("job", match.group(1), INT64_MAX, value),
        sequence=_to_int("job", match.group(2), INT32_MAX, value),
    )


def parse_task_id(value: str) -> TaskId:
    """
    Parse a task identifier string.

    Raises:
        MalformedError if the string is not a canonical task id
    """
    value = _require_string("task", value)
    match = _TASK_RE.fullmatch(value)
    if match is None:
        raise MalformedError(f"Invalid task id: {value!r}", value=value)
    job_id = JobId(
        cluster_timestamp=_to_int("task", match.group(1), INT64_MAX, value),
        sequence=_to_int("task", match.group(2), INT32_MAX, value),
    )
    return TaskId(
        job_id=job_id,
        task_type=TaskType.from_symbol(match.group(3)),
        sequence=_to_int("task", match.group(4), INT32_MAX, value),
    )


def parse_attempt_id(value: str) -> TaskAttemptId:
    """
    Parse a task attempt identifier string.

    Raises:
        MalformedError if the string is not a canonical attempt id
    """
    value = _require_string("attempt", value)
    match = _ATTEMPT_RE.fullmatch(value)
    if match is None:
        raise MalformedError(f"Invalid task attempt id: {value!r}", value=value)
    job_id = JobId(
        cluster_timestamp=_to_int("attempt", match.group(1), INT64_MAX, value),
        sequence=_to_int("attempt", match.group(2), INT32_MAX, value),
    )
    task_id = TaskId(
        job_id=job_id,
        task_type=TaskType.from_symbol(match.group(3)),
        sequence=_to_int("attempt", match.group(4), INT32_MAX, value),
    )
    return TaskAttemptId(
        task_id=task_id,
        sequence=_to_int("attempt", match.group(5), INT32_MAX, value),
    )


def parse_task_type(value: str) -> TaskType:
    """
    Parse a task type filter symbol ("m" or "r").

    Raises:
        MalformedError for any other value
    """
    try:
        return TaskType.from_symbol(value)
    except ValueError:
        raise MalformedError("tasktype must be either m or r", value=value)


__all__ = [
    "JobId",
    "TaskId",
    "TaskAttemptId",
    "parse_job_id",
    "parse_task_id",
    "parse_attempt_id",
    "parse_task_type",
]
