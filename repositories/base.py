# ============================================================================
# JOB REGISTRY CONTRACTS
# ============================================================================
# STATUS: Core - Registry boundary with the scheduler
# PURPOSE: Lookup interfaces the resolver and control service depend on
# CREATED: 09 OCT 2026
# ============================================================================
"""
Job Registry Contracts

The scheduler owns the jobs. A JobRegistry is its read-only lookup surface:

    list_partial()    cheap enumeration; entries may be partial records
    get_full(job_id)  the full live view, or None
    get_application() description of the hosting application master

A ControlRegistry adds get_mutable(), which hands out the control
capability. Only the control service is given one.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Tuple

from core.ids import JobId
from core.models import ApplicationInfo, Job, JobSummary, MutableJob


class JobRegistry(ABC):
    """Read-only job lookup."""

    @abstractmethod
    def list_partial(self) -> Iterable[Tuple[JobId, JobSummary]]:
        """Enumerate known jobs. Summaries must not be served as jobs."""

    @abstractmethod
    def get_full(self, job_id: JobId) -> Optional[Job]:
        """Full view of a job by exact identifier, or None."""

    @abstractmethod
    def get_application(self) -> ApplicationInfo: ...


class ControlRegistry(JobRegistry):
    """Job lookup that can also hand out control handles."""

    @abstractmethod
    def get_mutable(self, job_id: JobId) -> Optional[MutableJob]:
        """Mutable handle of a job by exact identifier, or None."""


__all__ = ["JobRegistry", "ControlRegistry"]
