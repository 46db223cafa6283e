# ============================================================================
# SCHEDULER EVENT MODELS
# ============================================================================
# STATUS: Core model - Events dispatched to the owning scheduler
# PURPOSE: Typed commands the control endpoints hand off for async handling
# CREATED: 08 OCT 2026
# EXPORTS: JobEventType, TaskAttemptEventType, JobEvent,
#          JobSetNumReducesEvent, JobSetCallbackPortEvent, TaskAttemptEvent,
#          EventHandler
# DEPENDENCIES: pydantic, enum, abc
# ============================================================================
"""
Scheduler Event Models

The control endpoints never mutate job state themselves. They build one of
these events and hand it to the scheduler's event handler, which queues it
and returns immediately. Whether the event eventually takes effect is the
scheduler's business; callers poll the read endpoints to find out.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Union
from pydantic import BaseModel, Field

from core.ids import JobId, TaskAttemptId


class JobEventType(str, Enum):
    """Job-level events accepted from the control endpoints."""
    JOB_SET_NUM_REDUCES = "JOB_SET_NUM_REDUCES"
    JOB_SET_CALLBACK_PORT = "JOB_SET_CALLBACK_PORT"


class TaskAttemptEventType(str, Enum):
    """Attempt-level events accepted from the control endpoints."""
    TA_TOO_MANY_FETCH_FAILURE = "TA_TOO_MANY_FETCH_FAILURE"


class JobEvent(BaseModel):
    """Base for events addressed to a job."""
    job_id: JobId
    event_type: JobEventType
    created_at: datetime = Field(default_factory=datetime.utcnow)


class JobSetNumReducesEvent(JobEvent):
    """Ask the scheduler to run the job with a new total reduce count."""
    event_type: JobEventType = JobEventType.JOB_SET_NUM_REDUCES
    num_reduces: int = Field(..., ge=0)


class JobSetCallbackPortEvent(JobEvent):
    """Ask the scheduler to record a new callback port for the job."""
    event_type: JobEventType = JobEventType.JOB_SET_CALLBACK_PORT
    port: int


class TaskAttemptEvent(BaseModel):
    """Event addressed to one task attempt."""
    attempt_id: TaskAttemptId
    event_type: TaskAttemptEventType
    created_at: datetime = Field(default_factory=datetime.utcnow)


SchedulerEvent = Union[JobEvent, TaskAttemptEvent]


class EventHandler(ABC):
    """Entry point of the scheduler's event queue."""

    @abstractmethod
    def handle(self, event: SchedulerEvent) -> None:
        """
        Accept an event for later processing.

        Must not block on the event being processed.
        """
        pass


__all__ = [
    "JobEventType",
    "TaskAttemptEventType",
    "JobEvent",
    "JobSetNumReducesEvent",
    "JobSetCallbackPortEvent",
    "TaskAttemptEvent",
    "SchedulerEvent",
    "EventHandler",
]
