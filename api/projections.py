# ============================================================================
# RECORD PROJECTIONS
# ============================================================================
# STATUS: Core - Live object to response record transforms
# PURPOSE: Build API records from job, task and attempt handles
# CREATED: 10 OCT 2026
# ============================================================================
"""
Record Projections

Pure functions: each reads a live handle and returns a schema instance.
Nothing here writes to the handle.

The scheduler may change a handle while it is being projected. Every field
is read once and independently, so a record can mix values from slightly
different moments. Nothing tries to reconcile them.
"""

import time
from typing import Dict, List, Optional

from core.contracts import TaskState, TaskType
from core.models import AMInfo, ApplicationInfo, Counters, Job, Task, TaskAttempt
from .schemas import (
    AMAttemptInfo,
    AppInfo,
    AttemptCounterInfo,
    ConfEntry,
    ConfInfo,
    CounterGroupInfo,
    CounterValue,
    JobCounterGroup,
    JobCounterInfo,
    JobCounterValue,
    JobInfo,
    ReduceTaskAttemptInfo,
    TaskAttemptInfo,
    TaskCounterInfo,
    TaskInfo,
)


def now_millis() -> int:
    return int(time.time() * 1000)


def elapsed(start: int, finish: int, is_running: bool, now: Optional[int] = None) -> int:
    """
    Elapsed milliseconds between two epoch-millisecond times.

    Both set:          finish - start, or -1 if that is negative
    Running, no end:   now - start, or 0 if start is unset
    Otherwise:         -1
    """
    if start > 0 and finish > 0:
        delta = finish - start
        return delta if delta >= 0 else -1
    if is_running:
        if start <= 0:
            return 0
        return (now if now is not None else now_millis()) - start
    return -1


def _percent(fraction: float) -> float:
    return fraction * 100


def _join(lines: List[str]) -> str:
    return "\n".join(lines)


# ============================================================================
# APPLICATION
# ============================================================================

def project_app(app: ApplicationInfo) -> AppInfo:
    return AppInfo(
        app_id=app.app_id,
        name=app.name,
        user=app.user,
        started_on=app.start_time,
        elapsed_time=elapsed(app.start_time, 0, is_running=True),
    )


# ============================================================================
# JOBS
# ============================================================================

def project_job(job: Job, has_access: bool) -> JobInfo:
    """
    Job record.

    Task and attempt breakdowns and ACLs are only computed when the caller
    has access to the job.
    """
    start = job.start_time
    finish = job.finish_time
    state = job.state
    info = JobInfo(
        id=str(job.job_id),
        name=job.name,
        user=job.user,
        state=state,
        start_time=start,
        finish_time=finish,
        elapsed_time=elapsed(start, finish, is_running=not state.is_terminal()),
        maps_total=job.total_maps,
        maps_completed=job.completed_maps,
        reduces_total=job.total_reduces,
        reduces_completed=job.completed_reduces,
        map_progress=_percent(job.map_progress),
        reduce_progress=_percent(job.reduce_progress),
        uberized=job.is_uber,
        diagnostics=_join(job.diagnostics),
        has_access=has_access,
    )
    if has_access:
        _fill_breakdown(info, job)
    return info


def _fill_breakdown(info: JobInfo, job: Job) -> None:
    counts: Dict[str, int] = {
        "maps_pending": 0,
        "maps_running": 0,
        "reduces_pending": 0,
        "reduces_running": 0,
    }
    for prefix in ("map", "reduce"):
        for kind in ("new", "running", "failed", "killed", "successful"):
            counts[f"{kind}_{prefix}_attempts"] = 0

    for task in job.tasks.values():
        prefix = "map" if task.task_type == TaskType.MAP else "reduce"
        state = task.state
        if state.is_pending():
            counts[f"{prefix}s_pending"] += 1
        elif state == TaskState.RUNNING:
            counts[f"{prefix}s_running"] += 1

        for attempt in task.attempts.values():
            attempt_state = attempt.state
            if attempt_state.is_new():
                kind = "new"
            elif attempt_state.is_running():
                kind = "running"
            elif attempt_state.is_failed():
                kind = "failed"
            elif attempt_state.is_killed():
                kind = "killed"
            else:
                kind = "successful"
            counts[f"{kind}_{prefix}_attempts"] += 1

    for name, value in counts.items():
        setattr(info, name, value)
    info.acls = [
        ConfEntry(name=acl.value, value=str(entry))
        for acl, entry in sorted(job.acls.items(), key=lambda item: item[0].value)
    ]


def project_am_attempt(am: AMInfo, user: str) -> AMAttemptInfo:
    node_http_address = am.node_http_address
    return AMAttemptInfo(
        id=am.attempt_number,
        node_id=am.node_id,
        node_http_address=node_http_address,
        container_id=am.container_id,
        start_time=am.start_time,
        logs_link=f"//{node_http_address}/node/containerlogs/{am.container_id}/{user}",
    )


def project_conf(job: Job, properties: Dict[str, str]) -> ConfInfo:
    return ConfInfo(
        path=job.conf_path,
        properties=[ConfEntry(name=k, value=v) for k, v in sorted(properties.items())],
    )


# ============================================================================
# COUNTERS
# ============================================================================

def project_job_counters(job: Job) -> JobCounterInfo:
    """
    Job counters with total, map and reduce values per counter.

    Map and reduce values are summed over the tasks of that type; the total
    comes from the job's aggregated counters.
    """
    totals = job.get_all_counters()
    by_type = {TaskType.MAP: Counters(), TaskType.REDUCE: Counters()}
    for task in job.tasks.values():
        by_type[task.task_type].increment_all(task.get_counters())

    groups = []
    for group in totals.all_groups():
        values = []
        for counter in group.all_counters():
            map_counter = by_type[TaskType.MAP].find_counter(group.name, counter.name)
            reduce_counter = by_type[TaskType.REDUCE].find_counter(group.name, counter.name)
            values.append(JobCounterValue(
                name=counter.name,
                total_counter_value=counter.value,
                map_counter_value=map_counter.value if map_counter else 0,
                reduce_counter_value=reduce_counter.value if reduce_counter else 0,
            ))
        groups.append(JobCounterGroup(counter_group_name=group.name, counter=values))

    return JobCounterInfo(id=str(job.job_id), counter_group=groups)


def _counter_groups(counters: Counters) -> List[CounterGroupInfo]:
    return [
        CounterGroupInfo(
            counter_group_name=group.name,
            counter=[CounterValue(name=c.name, value=c.value) for c in group.all_counters()],
        )
        for group in counters.all_groups()
    ]


def project_task_counters(task: Task) -> TaskCounterInfo:
    return TaskCounterInfo(
        id=str(task.task_id),
        task_counter_group=_counter_groups(task.get_counters()),
    )


def project_attempt_counters(attempt: TaskAttempt) -> AttemptCounterInfo:
    return AttemptCounterInfo(
        id=str(attempt.attempt_id),
        task_attempt_counter_group=_counter_groups(attempt.get_counters()),
    )


# ============================================================================
# TASKS AND ATTEMPTS
# ============================================================================

def project_task(task: Task) -> TaskInfo:
    start = task.start_time
    finish = task.finish_time
    state = task.state
    successful = task.successful_attempt
    return TaskInfo(
        id=str(task.task_id),
        type=task.task_type,
        state=state,
        progress=_percent(task.progress),
        start_time=start,
        finish_time=finish,
        elapsed_time=elapsed(start, finish, is_running=state == TaskState.RUNNING),
        status=task.status or "",
        successful_attempt=str(successful) if successful else "",
    )


def project_attempt(attempt: TaskAttempt, task_type: TaskType) -> TaskAttemptInfo:
    """Generic or reduce attempt record, chosen by task type."""
    start = attempt.start_time
    finish = attempt.finish_time
    state = attempt.state
    fields = dict(
        id=str(attempt.attempt_id),
        type=task_type,
        state=state,
        progress=_percent(attempt.progress),
        start_time=start,
        finish_time=finish,
        elapsed_time=elapsed(start, finish, is_running=state.is_running()),
        status=attempt.status or "",
        diagnostics=_join(attempt.diagnostics),
        node_http_address=attempt.node_http_address,
        rack=attempt.node_rack_name,
        assigned_container_id=attempt.assigned_container_id,
    )
    if task_type != TaskType.REDUCE:
        return TaskAttemptInfo(**fields)

    shuffle = attempt.shuffle_finish_time
    merge = attempt.sort_finish_time
    return ReduceTaskAttemptInfo(
        **fields,
        shuffle_finish_time=shuffle,
        merge_finish_time=merge,
        elapsed_shuffle_time=elapsed(start, shuffle, is_running=False),
        elapsed_merge_time=elapsed(shuffle, merge, is_running=False),
        elapsed_reduce_time=elapsed(merge, finish, is_running=False),
    )


__all__ = [
    "elapsed",
    "now_millis",
    "project_app",
    "project_job",
    "project_am_attempt",
    "project_conf",
    "project_job_counters",
    "project_task_counters",
    "project_attempt_counters",
    "project_task",
    "project_attempt",
]
