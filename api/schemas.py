# ============================================================================
# API SCHEMAS
# ============================================================================
# STATUS: Core - Response schemas
# PURPOSE: Pydantic models for the AM web services records
# CREATED: 10 OCT 2026
# ============================================================================
"""
API Schemas

Response models for the read endpoints. Fields are snake_case in Python
and camelCase on the wire (startTime, mapsTotal, ...), the names cluster
clients already expect.

Times are epoch milliseconds; progress values are percentages (0-100).
"""

from typing import List, Optional, Union
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from core.contracts import JobState, TaskAttemptState, TaskState, TaskType


class WireModel(BaseModel):
    """Base for records serialized with camelCase names."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


# ============================================================================
# APPLICATION
# ============================================================================

class AppInfo(WireModel):
    """The application master serving this API."""
    app_id: str
    name: str
    user: str
    started_on: int
    elapsed_time: int


# ============================================================================
# JOBS
# ============================================================================

class ConfEntry(WireModel):
    """One name/value pair (ACL or configuration property)."""
    name: str
    value: str


class JobInfo(WireModel):
    """
    Job record.

    The per-state task and attempt counts and the ACLs are only filled in
    when the caller may view the job; has_access says which case applies.
    """
    id: str
    name: str
    user: str
    state: JobState
    start_time: int
    finish_time: int
    elapsed_time: int
    maps_total: int
    maps_completed: int
    reduces_total: int
    reduces_completed: int
    map_progress: float
    reduce_progress: float
    uberized: bool
    diagnostics: str = ""
    has_access: bool = False

    maps_pending: Optional[int] = None
    maps_running: Optional[int] = None
    reduces_pending: Optional[int] = None
    reduces_running: Optional[int] = None
    new_map_attempts: Optional[int] = None
    running_map_attempts: Optional[int] = None
    failed_map_attempts: Optional[int] = None
    killed_map_attempts: Optional[int] = None
    successful_map_attempts: Optional[int] = None
    new_reduce_attempts: Optional[int] = None
    running_reduce_attempts: Optional[int] = None
    failed_reduce_attempts: Optional[int] = None
    killed_reduce_attempts: Optional[int] = None
    successful_reduce_attempts: Optional[int] = None
    acls: Optional[List[ConfEntry]] = None


class JobsInfo(WireModel):
    jobs: List[JobInfo] = Field(default_factory=list)


class AMAttemptInfo(WireModel):
    """One execution of the application master."""
    id: int
    node_id: str
    node_http_address: str
    container_id: str
    start_time: int
    logs_link: str


class AMAttemptsInfo(WireModel):
    job_attempts: List[AMAttemptInfo] = Field(default_factory=list)


class ConfInfo(WireModel):
    """Job configuration."""
    path: Optional[str] = None
    properties: List[ConfEntry] = Field(default_factory=list, alias="property")


# ============================================================================
# COUNTERS
# ============================================================================

class JobCounterValue(WireModel):
    name: str
    total_counter_value: int
    map_counter_value: int
    reduce_counter_value: int


class JobCounterGroup(WireModel):
    counter_group_name: str
    counter: List[JobCounterValue] = Field(default_factory=list)


class JobCounterInfo(WireModel):
    """Job counters split into map, reduce and total values."""
    id: str
    counter_group: List[JobCounterGroup] = Field(default_factory=list)


class CounterValue(WireModel):
    name: str
    value: int


class CounterGroupInfo(WireModel):
    counter_group_name: str
    counter: List[CounterValue] = Field(default_factory=list)


class TaskCounterInfo(WireModel):
    id: str
    task_counter_group: List[CounterGroupInfo] = Field(default_factory=list)


class AttemptCounterInfo(WireModel):
    id: str
    task_attempt_counter_group: List[CounterGroupInfo] = Field(default_factory=list)


# ============================================================================
# TASKS
# ============================================================================

class TaskInfo(WireModel):
    """Task record."""
    id: str
    type: TaskType
    state: TaskState
    progress: float
    start_time: int
    finish_time: int
    elapsed_time: int
    status: str = ""
    successful_attempt: str = ""


class TasksInfo(WireModel):
    tasks: List[TaskInfo] = Field(default_factory=list)


class TaskAttemptInfo(WireModel):
    """Attempt record shared by map and reduce attempts."""
    id: str
    type: TaskType
    state: TaskAttemptState
    progress: float
    start_time: int
    finish_time: int
    elapsed_time: int
    status: str = ""
    diagnostics: str = ""
    node_http_address: Optional[str] = None
    rack: Optional[str] = None
    assigned_container_id: Optional[str] = None


class ReduceTaskAttemptInfo(TaskAttemptInfo):
    """
    Reduce attempt record, adding the phase timings.

    shuffle: start -> shuffle finish
    merge:   shuffle finish -> merge (sort) finish
    reduce:  merge finish -> attempt finish
    """
    shuffle_finish_time: int
    merge_finish_time: int
    elapsed_shuffle_time: int
    elapsed_merge_time: int
    elapsed_reduce_time: int


class TaskAttemptsInfo(WireModel):
    # Reduce shape listed first so its extra fields survive validation
    task_attempts: List[Union[ReduceTaskAttemptInfo, TaskAttemptInfo]] = Field(default_factory=list)


# ============================================================================
# ERRORS
# ============================================================================

class ErrorResponse(BaseModel):
    """Error response."""
    error: str
    detail: Optional[str] = None
    job_id: Optional[str] = None
