# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for the job model boundary contracts
# CREATED: 07 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Handles (ABCs) describe the live job model the scheduler owns.
Value models (pydantic) describe counters, ACLs, AM attempts and events.
"""

from core.models.acl import AccessControlList
from core.models.application import AMInfo, ApplicationInfo
from core.models.counters import Counter, CounterGroup, Counters
from core.models.events import (
    EventHandler,
    JobEvent,
    JobEventType,
    JobSetCallbackPortEvent,
    JobSetNumReducesEvent,
    TaskAttemptEvent,
    TaskAttemptEventType,
)
from core.models.job import Job, JobSummary, MutableJob
from core.models.task import MutableTask, MutableTaskAttempt, Task, TaskAttempt

__all__ = [
    # Values
    "AccessControlList",
    "AMInfo",
    "ApplicationInfo",
    "Counter",
    "CounterGroup",
    "Counters",
    # Events
    "EventHandler",
    "JobEvent",
    "JobEventType",
    "JobSetCallbackPortEvent",
    "JobSetNumReducesEvent",
    "TaskAttemptEvent",
    "TaskAttemptEventType",
    # Handles
    "Job",
    "JobSummary",
    "MutableJob",
    "Task",
    "TaskAttempt",
    "MutableTask",
    "MutableTaskAttempt",
]
