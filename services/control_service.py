# ============================================================================
# CONTROL SERVICE
# ============================================================================
# STATUS: Service - Administrative job mutations
# PURPOSE: Resize reduce phase, force map reruns, set the callback port
# CREATED: 10 OCT 2026
# ============================================================================
"""
Control Service

Every administrative mutation is a ControlCommand applied to a MutableJob:

    check(job)   precondition; raises BadRequestError
    apply(job)   takes effect, either directly (AckMode.SYNC) or by
                 handing an event to the scheduler (AckMode.ASYNC)

An ASYNC command's success token only means the event was accepted.
Callers poll the read endpoints to see the effect.

Commands:
    SetNumReducesCommand    ASYNC  JobSetNumReducesEvent
    RerunMapTaskCommand     ASYNC  TA_TOO_MANY_FETCH_FAILURE to attempt 0
    SetCallbackPortCommand  SYNC by default, ASYNC when configured

The legacy rerun response coalesces outcomes into "<jobid>:<STATUS>";
rerun_map_task_strict raises instead.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from core.config import ControlDefaults
from core.contracts import AckMode, ControlStatus, TaskType
from core.errors import BadRequestError, MalformedError, NotFoundError
from core.ids import TaskAttemptId, TaskId, parse_job_id
from core.logging import log_audit, log_context
from core.models import (
    JobSetCallbackPortEvent,
    JobSetNumReducesEvent,
    MutableJob,
    TaskAttemptEvent,
    TaskAttemptEventType,
)
from repositories import ControlRegistry

logger = logging.getLogger(__name__)


# ============================================================================
# COMMANDS
# ============================================================================

class ControlCommand(ABC):
    """One administrative mutation of a job."""

    name: str = "control"

    def __init__(self, ack: AckMode):
        self.ack = ack

    def check(self, job: MutableJob) -> None:
        """Validate preconditions against the live job."""

    @abstractmethod
    def apply(self, job: MutableJob) -> None: ...

    def describe(self) -> Dict[str, Any]:
        return {"ack": self.ack.value}


class SetNumReducesCommand(ControlCommand):
    """Ask the scheduler to run the job with a new total reduce count."""

    name = "setnumreducers"

    def __init__(self, num_reduces: int):
        super().__init__(AckMode.ASYNC)
        self.num_reduces = num_reduces

    def check(self, job: MutableJob) -> None:
        if self.num_reduces < 0:
            raise BadRequestError(
                f"nreducers must not be negative: {self.num_reduces}",
                job_id=str(job.job_id),
            )
        running = job.running_reduces
        if self.num_reduces < running:
            raise BadRequestError(
                f"Cannot set nreducers to {self.num_reduces}: "
                f"{running} reduce tasks are already running",
                job_id=str(job.job_id),
            )

    def apply(self, job: MutableJob) -> None:
        job.event_handler.handle(
            JobSetNumReducesEvent(job_id=job.job_id, num_reduces=self.num_reduces)
        )

    def describe(self) -> Dict[str, Any]:
        return {**super().describe(), "num_reduces": self.num_reduces}


class RerunMapTaskCommand(ControlCommand):
    """Fail attempt 0 of a map task so the scheduler runs it again."""

    name = "rerunmaptask"

    def __init__(self, map_index: int):
        super().__init__(AckMode.ASYNC)
        self.map_index = map_index

    def check(self, job: MutableJob) -> None:
        total = job.total_maps
        if not 0 <= self.map_index < total:
            raise BadRequestError(
                f"Map index {self.map_index} out of range: job has {total} maps",
                job_id=str(job.job_id),
            )

    def apply(self, job: MutableJob) -> None:
        task_id = TaskId(job_id=job.job_id, task_type=TaskType.MAP, sequence=self.map_index)
        task = job.get_mutable_task(task_id)
        if task is None:
            raise NotFoundError(f"task not found with id {task_id}", job_id=str(job.job_id))

        attempt_id = TaskAttemptId(task_id=task_id, sequence=0)
        attempt = task.get_mutable_attempt(attempt_id)
        if attempt is None:
            raise NotFoundError(
                f"task attempt not found with id {attempt_id}", job_id=str(job.job_id)
            )

        attempt.handle(
            TaskAttemptEvent(
                attempt_id=attempt_id,
                event_type=TaskAttemptEventType.TA_TOO_MANY_FETCH_FAILURE,
            )
        )

    def describe(self) -> Dict[str, Any]:
        return {**super().describe(), "map_index": self.map_index}


class SetCallbackPortCommand(ControlCommand):
    """Record the port the work builder listens on for callbacks."""

    name = "workbuilderport"

    def __init__(self, port: int, ack: AckMode = AckMode.SYNC):
        super().__init__(ack)
        self.port = port

    def apply(self, job: MutableJob) -> None:
        if self.ack == AckMode.SYNC:
            job.set_callback_port(self.port)
        else:
            job.event_handler.handle(JobSetCallbackPortEvent(job_id=job.job_id, port=self.port))

    def describe(self) -> Dict[str, Any]:
        return {**super().describe(), "port": self.port}


# ============================================================================
# SERVICE
# ============================================================================

class ControlService:
    """Runs control commands against jobs from a ControlRegistry."""

    def __init__(self, registry: ControlRegistry, defaults: Optional[ControlDefaults] = None):
        self.registry = registry
        self.defaults = defaults or ControlDefaults()

    def _resolve(self, job_id: str) -> MutableJob:
        """
        Raises:
            MalformedError, NotFoundError
        """
        parsed = parse_job_id(job_id)
        job = self.registry.get_mutable(parsed)
        if job is None:
            raise NotFoundError(f"job, {job_id}, is not found", job_id=job_id)
        return job

    def _run(self, job: MutableJob, command: ControlCommand) -> None:
        command.check(job)
        command.apply(job)
        logger.info(f"{command.name} accepted for {job.job_id} ({command.ack.value})")

    def set_num_reducers(self, job_id: str, num_reduces: int, caller: Optional[str] = None) -> str:
        """
        Resize the reduce phase.

        Returns:
            "SUCCEEDED"

        Raises:
            MalformedError, NotFoundError, BadRequestError
        """
        command = SetNumReducesCommand(num_reduces)
        with log_context(job_id=job_id, caller=caller, operation=command.name):
            try:
                self._run(self._resolve(job_id), command)
            except Exception as e:
                log_audit(command.name, {**command.describe(), "outcome": type(e).__name__})
                raise
            log_audit(command.name, {**command.describe(), "outcome": ControlStatus.SUCCEEDED.value})
        return ControlStatus.SUCCEEDED.value

    def set_callback_port(self, job_id: str, port: int, caller: Optional[str] = None) -> str:
        """
        Set the job's callback port.

        Returns:
            "SUCCEEDED"

        Raises:
            MalformedError, NotFoundError
        """
        command = SetCallbackPortCommand(port, ack=self.defaults.callback_port_ack)
        with log_context(job_id=job_id, caller=caller, operation=command.name):
            try:
                self._run(self._resolve(job_id), command)
            except Exception as e:
                log_audit(command.name, {**command.describe(), "outcome": type(e).__name__})
                raise
            log_audit(command.name, {**command.describe(), "outcome": ControlStatus.SUCCEEDED.value})
        return ControlStatus.SUCCEEDED.value

    def rerun_map_task(self, job_id: str, map_index: int, caller: Optional[str] = None) -> str:
        """
        Force a rerun of one map task, legacy form.

        Unresolvable jobs, tasks and attempts give NOTFOUND. Any other
        failure after the index check gives FAILED. An out-of-range index
        still raises BadRequestError.

        Returns:
            "<job_id>:SUCCEEDED" | "<job_id>:NOTFOUND" | "<job_id>:FAILED"
        """
        command = RerunMapTaskCommand(map_index)
        with log_context(job_id=job_id, caller=caller, operation=command.name):
            try:
                status = self._rerun_status(job_id, command)
            except BadRequestError:
                log_audit(command.name, {**command.describe(), "outcome": BadRequestError.__name__})
                raise
            log_audit(command.name, {**command.describe(), "outcome": status.value})
        return f"{job_id}:{status.value}"

    def _rerun_status(self, job_id: str, command: RerunMapTaskCommand) -> ControlStatus:
        try:
            job = self._resolve(job_id)
        except (MalformedError, NotFoundError) as e:
            logger.info(f"Rerun target job not found: {e.message}")
            return ControlStatus.NOTFOUND

        command.check(job)

        try:
            command.apply(job)
        except NotFoundError as e:
            logger.info(f"Rerun target not found: {e.message}")
            return ControlStatus.NOTFOUND
        except Exception:
            logger.exception(f"Rerun of map {command.map_index} in {job_id} failed")
            return ControlStatus.FAILED

        logger.info(f"rerunmaptask accepted for {job_id} map {command.map_index}")
        return ControlStatus.SUCCEEDED

    def rerun_map_task_strict(self, job_id: str, map_index: int, caller: Optional[str] = None) -> str:
        """
        Force a rerun of one map task, raising on every failure.

        Returns:
            "<job_id>:SUCCEEDED"

        Raises:
            MalformedError, NotFoundError, BadRequestError, or whatever
            the attempt's event handling raised
        """
        command = RerunMapTaskCommand(map_index)
        with log_context(job_id=job_id, caller=caller, operation=f"{command.name}.strict"):
            try:
                self._run(self._resolve(job_id), command)
            except Exception as e:
                log_audit(f"{command.name}.strict", {**command.describe(), "outcome": type(e).__name__})
                raise
            log_audit(
                f"{command.name}.strict",
                {**command.describe(), "outcome": ControlStatus.SUCCEEDED.value},
            )
        return f"{job_id}:{ControlStatus.SUCCEEDED.value}"


__all__ = [
    "ControlCommand",
    "SetNumReducesCommand",
    "RerunMapTaskCommand",
    "SetCallbackPortCommand",
    "ControlService",
]
