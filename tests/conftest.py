# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# STATUS: Tests - In-memory job model fixtures
# PURPOSE: Build a small, fully populated registry for route and service tests
# CREATED: 11 OCT 2026
# ============================================================================
"""
Shared Test Fixtures

Registry contents:

    job_1326232085508_0004  owner alice, view ACL "bob", RUNNING
        m_000000  SUCCEEDED   attempt _0 SUCCEEDED
        m_000001  RUNNING     attempt _0 RUNNING
        m_000002  NEW         no attempts
        r_000000  RUNNING     attempt _0 RUNNING (shuffle done)
    job_1326232085508_0005  owner carol, empty view ACL, SUCCEEDED, no tasks
"""

import pytest
from fastapi.testclient import TestClient

from core.config import AccessDefaults, ControlDefaults, Defaults
from core.contracts import JobACL, JobState, TaskAttemptState, TaskState
from core.ids import parse_attempt_id, parse_job_id, parse_task_id
from core.models import AccessControlList, AMInfo, ApplicationInfo, Counters
from repositories import InMemoryJob, InMemoryJobRegistry, InMemoryTask, InMemoryTaskAttempt

JOB_ID = "job_1326232085508_0004"
OTHER_JOB_ID = "job_1326232085508_0005"
MISSING_JOB_ID = "job_1326232085508_0099"
PREFIX = "/ws/v1/mapreduce"


def _make_attempt(attempt_id, state, **fields):
    return InMemoryTaskAttempt(parse_attempt_id(attempt_id), state=state, **fields)


def _make_task(task_id, state, attempts=(), **fields):
    return InMemoryTask(parse_task_id(task_id), state=state, attempts=list(attempts), **fields)


def make_main_job() -> InMemoryJob:
    """The job owned by alice with two maps in flight and one reduce."""
    job = InMemoryJob(
        parse_job_id(JOB_ID),
        name="wordcount",
        user="alice",
        state=JobState.RUNNING,
        start_time=1000,
        diagnostics=["Job setup complete"],
        acls={
            JobACL.VIEW_JOB: AccessControlList.parse("bob"),
            JobACL.MODIFY_JOB: AccessControlList.parse(""),
        },
        am_infos=[
            AMInfo(
                attempt_number=1,
                start_time=900,
                container_id="container_1326232085508_0004_01_000001",
                node_manager_host="node1.example.com",
                node_manager_port=45454,
                node_manager_http_port=8042,
            ),
        ],
        counters=Counters.from_dict({"JobCounter": {"TOTAL_LAUNCHED_MAPS": 2}}),
        conf_path="/tmp/job_1326232085508_0004/job.yaml",
        configuration={"mapreduce.job.name": "wordcount", "mapreduce.job.reduces": "1"},
    )

    job.add_task(_make_task(
        "task_1326232085508_0004_m_000000",
        TaskState.SUCCEEDED,
        attempts=[_make_attempt(
            "attempt_1326232085508_0004_m_000000_0",
            TaskAttemptState.SUCCEEDED,
            progress=1.0,
            start_time=1100,
            finish_time=1600,
            node_http_address="node2.example.com:8042",
            node_rack_name="/rack1",
            assigned_container_id="container_1326232085508_0004_01_000002",
            counters=Counters.from_dict({"TaskCounter": {"MAP_INPUT_RECORDS": 10}}),
        )],
        progress=1.0,
        start_time=1100,
        finish_time=1600,
        successful_attempt=parse_attempt_id("attempt_1326232085508_0004_m_000000_0"),
        counters=Counters.from_dict({"TaskCounter": {"MAP_INPUT_RECORDS": 10}}),
    ))
    job.add_task(_make_task(
        "task_1326232085508_0004_m_000001",
        TaskState.RUNNING,
        attempts=[_make_attempt(
            "attempt_1326232085508_0004_m_000001_0",
            TaskAttemptState.RUNNING,
            progress=0.5,
            start_time=1200,
        )],
        progress=0.5,
        start_time=1200,
        counters=Counters.from_dict({"TaskCounter": {"MAP_INPUT_RECORDS": 5}}),
    ))
    job.add_task(_make_task("task_1326232085508_0004_m_000002", TaskState.NEW))
    job.add_task(_make_task(
        "task_1326232085508_0004_r_000000",
        TaskState.RUNNING,
        attempts=[_make_attempt(
            "attempt_1326232085508_0004_r_000000_0",
            TaskAttemptState.RUNNING,
            progress=0.4,
            start_time=2000,
            shuffle_finish_time=2500,
            counters=Counters.from_dict({"TaskCounter": {"REDUCE_INPUT_RECORDS": 3}}),
        )],
        progress=0.4,
        start_time=2000,
        counters=Counters.from_dict({"TaskCounter": {"REDUCE_INPUT_RECORDS": 3}}),
    ))
    return job


def make_other_job() -> InMemoryJob:
    """A finished job owned by carol that nobody else may view."""
    return InMemoryJob(
        parse_job_id(OTHER_JOB_ID),
        name="terasort",
        user="carol",
        state=JobState.SUCCEEDED,
        start_time=5000,
        finish_time=9000,
        total_maps=0,
        total_reduces=0,
        acls={JobACL.VIEW_JOB: AccessControlList.parse("")},
    )


@pytest.fixture
def registry():
    reg = InMemoryJobRegistry(ApplicationInfo(
        app_id="application_1326232085508_0004",
        name="wordcount",
        user="alice",
        start_time=800,
    ))
    reg.add_job(make_main_job())
    reg.add_job(make_other_job())
    return reg


@pytest.fixture
def defaults():
    return Defaults(access=AccessDefaults(), control=ControlDefaults())


@pytest.fixture
def client(registry, defaults):
    from main import create_app

    return TestClient(create_app(registry, defaults))
