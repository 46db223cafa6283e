# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# STATUS: Core - Job registry layer
# PURPOSE: Lookup of live jobs owned by the scheduler
# CREATED: 09 OCT 2026
# ============================================================================
"""
Repositories Module

Registry contracts plus the in-memory reference registry.

Usage:
    from repositories import InMemoryJobRegistry

    registry = InMemoryJobRegistry()
    registry.add_job(job)
    job = registry.get_full(job.job_id)
"""

from .base import JobRegistry, ControlRegistry
from .memory import (
    InMemoryJob,
    InMemoryJobRegistry,
    InMemoryTask,
    InMemoryTaskAttempt,
    QueuedEventHandler,
)

__all__ = [
    "JobRegistry",
    "ControlRegistry",
    "InMemoryJob",
    "InMemoryJobRegistry",
    "InMemoryTask",
    "InMemoryTaskAttempt",
    "QueuedEventHandler",
]
