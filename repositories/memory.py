# ============================================================================
# IN-MEMORY JOB REGISTRY
# ============================================================================
# STATUS: Core - Reference job model
# PURPOSE: Thread-safe in-process jobs, tasks and attempts behind the
#          registry contracts
# CREATED: 09 OCT 2026
# ============================================================================
"""
In-Memory Job Registry

A self-contained job model used by the development server and the tests.
A production deployment plugs in a registry backed by the real scheduler.

Writes take a per-object lock. Reads of collections return snapshot
copies, so a request iterating tasks never sees the dict change under it.

Events handed to a job's event handler are only queued. Call
InMemoryJobRegistry.process_events() to apply them, standing in for the
scheduler's dispatcher thread.

Usage:
    registry = InMemoryJobRegistry(ApplicationInfo(app_id="application_1_0001"))
    job = InMemoryJob(parse_job_id("job_1326232085508_0004"), user="alice")
    job.add_task(InMemoryTask(task_id, attempts=[InMemoryTaskAttempt(attempt_id)]))
    registry.add_job(job)
"""

import logging
import queue
import threading
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from core.contracts import JobACL, JobState, TaskAttemptState, TaskState, TaskType
from core.ids import JobId, TaskAttemptId, TaskId
from core.models import (
    AccessControlList,
    AMInfo,
    ApplicationInfo,
    Counters,
    EventHandler,
    JobSetCallbackPortEvent,
    JobSetNumReducesEvent,
    JobSummary,
    MutableJob,
    MutableTask,
    MutableTaskAttempt,
    TaskAttemptEvent,
    TaskAttemptEventType,
)
from core.models.events import SchedulerEvent
from .base import ControlRegistry

logger = logging.getLogger(__name__)


# ============================================================================
# EVENT QUEUE
# ============================================================================

class QueuedEventHandler(EventHandler):
    """Event handler that only enqueues; never blocks the caller."""

    def __init__(self):
        self._queue: "queue.Queue[SchedulerEvent]" = queue.Queue()

    def handle(self, event: SchedulerEvent) -> None:
        self._queue.put_nowait(event)
        logger.debug(f"Queued {event.event_type.value} event")

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def drain(self) -> List[SchedulerEvent]:
        """Remove and return every queued event, oldest first."""
        events = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events


# ============================================================================
# TASK ATTEMPT
# ============================================================================

class InMemoryTaskAttempt(MutableTaskAttempt):
    """One attempt; events it receives go to its job's queue."""

    def __init__(
        self,
        attempt_id: TaskAttemptId,
        state: TaskAttemptState = TaskAttemptState.NEW,
        progress: float = 0.0,
        start_time: int = 0,
        finish_time: int = 0,
        shuffle_finish_time: int = 0,
        sort_finish_time: int = 0,
        node_http_address: Optional[str] = None,
        node_rack_name: Optional[str] = None,
        assigned_container_id: Optional[str] = None,
        diagnostics: Optional[List[str]] = None,
        status: str = "",
        counters: Optional[Counters] = None,
    ):
        self._attempt_id = attempt_id
        self._state = state
        self._progress = progress
        self._start_time = start_time
        self._finish_time = finish_time
        self._shuffle_finish_time = shuffle_finish_time
        self._sort_finish_time = sort_finish_time
        self._node_http_address = node_http_address
        self._node_rack_name = node_rack_name
        self._assigned_container_id = assigned_container_id
        self._diagnostics = list(diagnostics or [])
        self._status = status
        self._counters = counters or Counters()
        self._event_handler: Optional[EventHandler] = None
        self._lock = threading.Lock()

    @property
    def attempt_id(self) -> TaskAttemptId:
        return self._attempt_id

    @property
    def state(self) -> TaskAttemptState:
        return self._state

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def start_time(self) -> int:
        return self._start_time

    @property
    def finish_time(self) -> int:
        return self._finish_time

    @property
    def shuffle_finish_time(self) -> int:
        return self._shuffle_finish_time

    @property
    def sort_finish_time(self) -> int:
        return self._sort_finish_time

    @property
    def node_http_address(self) -> Optional[str]:
        return self._node_http_address

    @property
    def node_rack_name(self) -> Optional[str]:
        return self._node_rack_name

    @property
    def assigned_container_id(self) -> Optional[str]:
        return self._assigned_container_id

    @property
    def diagnostics(self) -> List[str]:
        with self._lock:
            return list(self._diagnostics)

    @property
    def status(self) -> str:
        return self._status

    def get_counters(self) -> Counters:
        with self._lock:
            return self._counters.model_copy(deep=True)

    def handle(self, event: TaskAttemptEvent) -> None:
        if self._event_handler is None:
            raise RuntimeError(f"Attempt {self._attempt_id} is not attached to a job")
        self._event_handler.handle(event)

    def bind(self, event_handler: EventHandler) -> None:
        self._event_handler = event_handler

    def update(self, **fields: Any) -> None:
        """Set attempt fields by name (state, progress, finish_time, ...)."""
        with self._lock:
            for name, value in fields.items():
                attr = f"_{name}"
                if not hasattr(self, attr):
                    raise AttributeError(f"Unknown attempt field: {name}")
                setattr(self, attr, value)

    def add_diagnostic(self, message: str) -> None:
        with self._lock:
            self._diagnostics.append(message)


# ============================================================================
# TASK
# ============================================================================

class InMemoryTask(MutableTask):
    """One map or reduce task and its attempts."""

    def __init__(
        self,
        task_id: TaskId,
        state: TaskState = TaskState.NEW,
        progress: float = 0.0,
        start_time: int = 0,
        finish_time: int = 0,
        status: str = "",
        successful_attempt: Optional[TaskAttemptId] = None,
        counters: Optional[Counters] = None,
        attempts: Optional[Iterable[InMemoryTaskAttempt]] = None,
    ):
        self._task_id = task_id
        self._state = state
        self._progress = progress
        self._start_time = start_time
        self._finish_time = finish_time
        self._status = status
        self._successful_attempt = successful_attempt
        self._counters = counters or Counters()
        self._attempts: Dict[TaskAttemptId, InMemoryTaskAttempt] = {}
        self._event_handler: Optional[EventHandler] = None
        self._lock = threading.Lock()
        for attempt in attempts or []:
            self.add_attempt(attempt)

    @property
    def task_id(self) -> TaskId:
        return self._task_id

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def start_time(self) -> int:
        return self._start_time

    @property
    def finish_time(self) -> int:
        return self._finish_time

    @property
    def status(self) -> str:
        return self._status

    @property
    def successful_attempt(self) -> Optional[TaskAttemptId]:
        return self._successful_attempt

    @property
    def attempts(self) -> Dict[TaskAttemptId, InMemoryTaskAttempt]:
        with self._lock:
            return dict(self._attempts)

    def get_attempt(self, attempt_id: TaskAttemptId) -> Optional[InMemoryTaskAttempt]:
        with self._lock:
            return self._attempts.get(attempt_id)

    def get_mutable_attempt(self, attempt_id: TaskAttemptId) -> Optional[InMemoryTaskAttempt]:
        return self.get_attempt(attempt_id)

    def get_counters(self) -> Counters:
        with self._lock:
            return self._counters.model_copy(deep=True)

    def add_attempt(self, attempt: InMemoryTaskAttempt) -> None:
        if attempt.attempt_id.task_id != self._task_id:
            raise ValueError(f"Attempt {attempt.attempt_id} does not belong to task {self._task_id}")
        with self._lock:
            self._attempts[attempt.attempt_id] = attempt
            if self._event_handler is not None:
                attempt.bind(self._event_handler)

    def bind(self, event_handler: EventHandler) -> None:
        with self._lock:
            self._event_handler = event_handler
            for attempt in self._attempts.values():
                attempt.bind(event_handler)

    def update(self, **fields: Any) -> None:
        """Set task fields by name (state, progress, successful_attempt, ...)."""
        with self._lock:
            for name, value in fields.items():
                attr = f"_{name}"
                if name == "attempts" or not hasattr(self, attr):
                    raise AttributeError(f"Unknown task field: {name}")
                setattr(self, attr, value)


# ============================================================================
# JOB
# ============================================================================

class InMemoryJob(MutableJob):
    """
    A job with its tasks, ACLs, AM attempts and configuration.

    Completed and running task counts and phase progress are derived from
    the tasks. total_maps / total_reduces default to the number of tasks of
    each type but can be fixed up front, as the scheduler does when a job
    is initialized before all tasks exist.
    """

    def __init__(
        self,
        job_id: JobId,
        name: str = "",
        user: str = "",
        state: JobState = JobState.NEW,
        start_time: int = 0,
        finish_time: int = 0,
        total_maps: Optional[int] = None,
        total_reduces: Optional[int] = None,
        is_uber: bool = False,
        diagnostics: Optional[List[str]] = None,
        acls: Optional[Dict[JobACL, AccessControlList]] = None,
        am_infos: Optional[List[AMInfo]] = None,
        counters: Optional[Counters] = None,
        conf_path: Optional[str] = None,
        configuration: Optional[Dict[str, str]] = None,
        event_handler: Optional[QueuedEventHandler] = None,
    ):
        self._job_id = job_id
        self._name = name
        self._user = user
        self._state = state
        self._start_time = start_time
        self._finish_time = finish_time
        self._total_maps = total_maps
        self._total_reduces = total_reduces
        self._is_uber = is_uber
        self._diagnostics = list(diagnostics or [])
        self._acls = dict(acls or {})
        self._am_infos = list(am_infos or [])
        self._counters = counters or Counters()
        self._conf_path = conf_path
        self._configuration = dict(configuration) if configuration is not None else None
        self._event_handler = event_handler or QueuedEventHandler()
        self._callback_port: Optional[int] = None
        self._tasks: Dict[TaskId, InMemoryTask] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Identity and lifecycle
    # ------------------------------------------------------------------

    @property
    def job_id(self) -> JobId:
        return self._job_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def user(self) -> str:
        return self._user

    @property
    def state(self) -> JobState:
        return self._state

    @property
    def start_time(self) -> int:
        return self._start_time

    @property
    def finish_time(self) -> int:
        return self._finish_time

    @property
    def is_uber(self) -> bool:
        return self._is_uber

    @property
    def diagnostics(self) -> List[str]:
        with self._lock:
            return list(self._diagnostics)

    @property
    def acls(self) -> Dict[JobACL, AccessControlList]:
        with self._lock:
            return dict(self._acls)

    @property
    def am_infos(self) -> List[AMInfo]:
        with self._lock:
            return list(self._am_infos)

    # ------------------------------------------------------------------
    # Task counts
    # ------------------------------------------------------------------

    def _count(self, task_type: TaskType, *states: TaskState) -> int:
        return sum(
            1 for task in self.tasks.values()
            if task.task_type == task_type and (not states or task.state in states)
        )

    def _progress(self, task_type: TaskType) -> float:
        tasks = [t for t in self.tasks.values() if t.task_type == task_type]
        if not tasks:
            return 0.0
        return sum(t.progress for t in tasks) / len(tasks)

    @property
    def total_maps(self) -> int:
        if self._total_maps is not None:
            return self._total_maps
        return self._count(TaskType.MAP)

    @property
    def total_reduces(self) -> int:
        if self._total_reduces is not None:
            return self._total_reduces
        return self._count(TaskType.REDUCE)

    @property
    def completed_maps(self) -> int:
        return self._count(TaskType.MAP, TaskState.SUCCEEDED)

    @property
    def completed_reduces(self) -> int:
        return self._count(TaskType.REDUCE, TaskState.SUCCEEDED)

    @property
    def running_reduces(self) -> int:
        return self._count(TaskType.REDUCE, TaskState.RUNNING)

    @property
    def map_progress(self) -> float:
        return self._progress(TaskType.MAP)

    @property
    def reduce_progress(self) -> float:
        return self._progress(TaskType.REDUCE)

    # ------------------------------------------------------------------
    # Tasks and counters
    # ------------------------------------------------------------------

    @property
    def tasks(self) -> Dict[TaskId, InMemoryTask]:
        with self._lock:
            return dict(self._tasks)

    def get_task(self, task_id: TaskId) -> Optional[InMemoryTask]:
        with self._lock:
            return self._tasks.get(task_id)

    def get_mutable_task(self, task_id: TaskId) -> Optional[InMemoryTask]:
        return self.get_task(task_id)

    def add_task(self, task: InMemoryTask) -> None:
        if task.task_id.job_id != self._job_id:
            raise ValueError(f"Task {task.task_id} does not belong to job {self._job_id}")
        task.bind(self._event_handler)
        with self._lock:
            self._tasks[task.task_id] = task

    def get_all_counters(self) -> Counters:
        """Job-level counters plus every task's counters."""
        with self._lock:
            total = self._counters.model_copy(deep=True)
        for task in self.tasks.values():
            total.increment_all(task.get_counters())
        return total

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def conf_path(self) -> Optional[str]:
        return self._conf_path

    def load_configuration(self) -> Dict[str, str]:
        """
        Load the job configuration.

        An in-memory configuration wins; otherwise conf_path is read as
        a YAML mapping of property name to value.

        Raises:
            OSError if there is no configuration or it cannot be read
        """
        if self._configuration is not None:
            return dict(self._configuration)
        if not self._conf_path:
            raise OSError(f"No configuration recorded for {self._job_id}")

        try:
            # Binary so yaml detects the encoding and reports bad bytes itself
            with open(self._conf_path, "rb") as f:
                data = yaml.safe_load(f)
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise OSError(f"Unreadable configuration {self._conf_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise OSError(f"Configuration {self._conf_path} is not a mapping")
        return {str(k): "" if v is None else str(v) for k, v in data.items()}

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    @property
    def event_handler(self) -> QueuedEventHandler:
        return self._event_handler

    @property
    def callback_port(self) -> Optional[int]:
        return self._callback_port

    def set_callback_port(self, port: int) -> None:
        with self._lock:
            self._callback_port = port
        logger.info(f"Job {self._job_id} callback port set to {port}")

    def update(self, **fields: Any) -> None:
        """Set job fields by name (state, finish_time, total_reduces, ...)."""
        with self._lock:
            for name, value in fields.items():
                attr = f"_{name}"
                if name in ("tasks", "event_handler") or not hasattr(self, attr):
                    raise AttributeError(f"Unknown job field: {name}")
                setattr(self, attr, value)

    def apply_event(self, event: SchedulerEvent) -> None:
        """Apply one dequeued event the way the scheduler would."""
        if isinstance(event, JobSetNumReducesEvent):
            self.update(total_reduces=event.num_reduces)
        elif isinstance(event, JobSetCallbackPortEvent):
            self.set_callback_port(event.port)
        elif isinstance(event, TaskAttemptEvent):
            if event.event_type == TaskAttemptEventType.TA_TOO_MANY_FETCH_FAILURE:
                self._fail_attempt(event.attempt_id)
        else:
            logger.warning(f"Job {self._job_id} ignoring unknown event {event!r}")

    def _fail_attempt(self, attempt_id: TaskAttemptId) -> None:
        task = self.get_task(attempt_id.task_id)
        attempt = task.get_attempt(attempt_id) if task else None
        if attempt is None:
            logger.warning(f"Fetch-failure event for unknown attempt {attempt_id}")
            return
        attempt.update(state=TaskAttemptState.FAILED)
        attempt.add_diagnostic("Too many fetch failures. Failing the attempt")
        # Map output is lost; the task goes back to be rescheduled
        task.update(state=TaskState.SCHEDULED, successful_attempt=None)

    def summary(self) -> JobSummary:
        return JobSummary(job_id=self._job_id, name=self._name, user=self._user, state=self._state)


# ============================================================================
# REGISTRY
# ============================================================================

class InMemoryJobRegistry(ControlRegistry):
    """Registry over InMemoryJob instances."""

    def __init__(self, application: Optional[ApplicationInfo] = None):
        self._application = application or ApplicationInfo(app_id="application_0_0000")
        self._jobs: Dict[JobId, InMemoryJob] = {}
        self._lock = threading.Lock()

    def add_job(self, job: InMemoryJob) -> None:
        with self._lock:
            self._jobs[job.job_id] = job
        logger.info(f"Registered job {job.job_id}")

    def remove_job(self, job_id: JobId) -> Optional[InMemoryJob]:
        with self._lock:
            return self._jobs.pop(job_id, None)

    def list_partial(self) -> List[Tuple[JobId, JobSummary]]:
        with self._lock:
            jobs = list(self._jobs.values())
        return [(job.job_id, job.summary()) for job in jobs]

    def get_full(self, job_id: JobId) -> Optional[InMemoryJob]:
        with self._lock:
            return self._jobs.get(job_id)

    def get_mutable(self, job_id: JobId) -> Optional[InMemoryJob]:
        return self.get_full(job_id)

    def get_application(self) -> ApplicationInfo:
        return self._application

    def process_events(self) -> int:
        """
        Apply every queued event to its job.

        Returns:
            Number of events applied
        """
        with self._lock:
            jobs = list(self._jobs.values())
        applied = 0
        for job in jobs:
            for event in job.event_handler.drain():
                job.apply_event(event)
                applied += 1
        if applied:
            logger.debug(f"Applied {applied} queued events")
        return applied


__all__ = [
    "QueuedEventHandler",
    "InMemoryTaskAttempt",
    "InMemoryTask",
    "InMemoryJob",
    "InMemoryJobRegistry",
]
