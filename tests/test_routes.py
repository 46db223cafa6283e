# ============================================================================
# READ ROUTES TESTS
# ============================================================================
# STATUS: Tests - AM web services read endpoints
# PURPOSE: Verify resolution, authorization and records over HTTP
# CREATED: 12 OCT 2026
# ============================================================================
"""
Read Routes Tests

Uses FastAPI TestClient against create_app() with the in-memory registry
from conftest.

Run with:
    pytest tests/test_routes.py -v
"""

import logging

import pytest
from fastapi.testclient import TestClient

from core.config import AccessDefaults, ControlDefaults, Defaults
from core.ids import parse_job_id
from core.logging import install_record_scope
from main import create_app
from repositories import InMemoryJob

from tests.conftest import JOB_ID, MISSING_JOB_ID, OTHER_JOB_ID, PREFIX

TASK_M0 = "task_1326232085508_0004_m_000000"
TASK_R0 = "task_1326232085508_0004_r_000000"
ATTEMPT_M0 = "attempt_1326232085508_0004_m_000000_0"
ATTEMPT_R0 = "attempt_1326232085508_0004_r_000000_0"
BROKEN_CONF_JOB_ID = "job_1326232085508_0007"

AS_MALLORY = {"X-Remote-User": "mallory"}


# ============================================================================
# APPLICATION
# ============================================================================

class TestAppInfo:

    @pytest.mark.parametrize("path", [f"{PREFIX}/", f"{PREFIX}/info"])
    def test_app_info(self, client, path):
        resp = client.get(path)
        assert resp.status_code == 200
        data = resp.json()
        assert data["appId"] == "application_1326232085508_0004"
        assert data["user"] == "alice"
        assert data["startedOn"] == 800
        assert data["elapsedTime"] > 0

    def test_root_and_livez(self, client):
        assert client.get("/livez").json() == {"status": "ok"}
        assert client.get("/").json()["api"] == PREFIX


# ============================================================================
# JOBS
# ============================================================================

class TestJobs:

    def test_list_includes_all_jobs(self, client):
        resp = client.get(f"{PREFIX}/jobs")
        assert resp.status_code == 200
        ids = sorted(job["id"] for job in resp.json()["jobs"])
        assert ids == [JOB_ID, OTHER_JOB_ID]

    def test_list_never_omits_denied_jobs(self, client):
        resp = client.get(f"{PREFIX}/jobs", headers=AS_MALLORY)
        jobs = {job["id"]: job for job in resp.json()["jobs"]}
        assert set(jobs) == {JOB_ID, OTHER_JOB_ID}
        assert jobs[JOB_ID]["hasAccess"] is False
        assert jobs[JOB_ID]["mapsPending"] is None
        assert jobs[JOB_ID]["acls"] is None

    def test_list_annotates_per_caller(self, client):
        resp = client.get(f"{PREFIX}/jobs", headers={"X-Remote-User": "bob"})
        jobs = {job["id"]: job for job in resp.json()["jobs"]}
        assert jobs[JOB_ID]["hasAccess"] is True
        assert jobs[OTHER_JOB_ID]["hasAccess"] is False

    def test_get_job_record(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}")
        assert resp.status_code == 200
        job = resp.json()
        assert job["name"] == "wordcount"
        assert job["state"] == "RUNNING"
        assert job["mapsTotal"] == 3
        assert job["mapsCompleted"] == 1
        assert job["reducesTotal"] == 1
        assert job["mapsPending"] == 1
        assert job["mapsRunning"] == 1
        assert job["reducesRunning"] == 1
        assert job["successfulMapAttempts"] == 1
        assert job["runningMapAttempts"] == 1
        assert job["runningReduceAttempts"] == 1
        assert job["diagnostics"] == "Job setup complete"
        acls = {a["name"]: a["value"] for a in job["acls"]}
        assert acls["mapreduce.job.acl-view-job"] == "bob"

    def test_get_job_unauthorized(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}", headers=AS_MALLORY)
        assert resp.status_code == 401
        body = resp.json()
        assert body["error"] == "unauthorized"
        assert body["job_id"] == JOB_ID

    def test_user_name_param_identifies_caller(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}", params={"user.name": "mallory"})
        assert resp.status_code == 401

    def test_get_job_not_found(self, client):
        resp = client.get(f"{PREFIX}/jobs/{MISSING_JOB_ID}")
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    def test_get_job_malformed(self, client):
        resp = client.get(f"{PREFIX}/jobs/job_bogus")
        assert resp.status_code == 400
        assert resp.json()["error"] == "malformed"

    def test_missing_job_reported_before_authorization(self, client):
        resp = client.get(f"{PREFIX}/jobs/{MISSING_JOB_ID}", headers=AS_MALLORY)
        assert resp.status_code == 404

    def test_finished_job_elapsed(self, client):
        job = client.get(f"{PREFIX}/jobs/{OTHER_JOB_ID}").json()
        assert job["elapsedTime"] == 4000


class TestJobSubresources:

    def test_job_attempts_without_view_check(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/jobattempts", headers=AS_MALLORY)
        assert resp.status_code == 200
        attempts = resp.json()["jobAttempts"]
        assert len(attempts) == 1
        am = attempts[0]
        assert am["id"] == 1
        assert am["nodeId"] == "node1.example.com:45454"
        assert am["logsLink"] == (
            "//node1.example.com:8042/node/containerlogs/"
            "container_1326232085508_0004_01_000001/alice"
        )

    def test_job_counters(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/counters")
        assert resp.status_code == 200
        groups = {g["counterGroupName"]: g for g in resp.json()["counterGroup"]}
        task_counters = {c["name"]: c for c in groups["TaskCounter"]["counter"]}
        assert task_counters["MAP_INPUT_RECORDS"]["totalCounterValue"] == 15
        assert task_counters["MAP_INPUT_RECORDS"]["mapCounterValue"] == 15
        assert task_counters["MAP_INPUT_RECORDS"]["reduceCounterValue"] == 0
        assert task_counters["REDUCE_INPUT_RECORDS"]["reduceCounterValue"] == 3
        job_counters = {c["name"]: c for c in groups["JobCounter"]["counter"]}
        assert job_counters["TOTAL_LAUNCHED_MAPS"]["totalCounterValue"] == 2

    def test_job_counters_require_view(self, client):
        assert client.get(f"{PREFIX}/jobs/{JOB_ID}/counters", headers=AS_MALLORY).status_code == 401

    def test_conf(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/conf")
        assert resp.status_code == 200
        conf = resp.json()
        assert conf["path"] == "/tmp/job_1326232085508_0004/job.yaml"
        props = {p["name"]: p["value"] for p in conf["property"]}
        assert props["mapreduce.job.name"] == "wordcount"

    def test_conf_unavailable_is_not_found(self, client):
        # No configuration recorded for the other job
        resp = client.get(f"{PREFIX}/jobs/{OTHER_JOB_ID}/conf")
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    def test_conf_with_undecodable_bytes_is_not_found(self, client, registry, tmp_path):
        conf = tmp_path / "job.yaml"
        conf.write_bytes(b"a: \xff\xfe\x80\n")
        registry.add_job(InMemoryJob(parse_job_id(BROKEN_CONF_JOB_ID), user="carol", conf_path=str(conf)))

        resp = client.get(f"{PREFIX}/jobs/{BROKEN_CONF_JOB_ID}/conf")
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    def test_conf_requires_view(self, client):
        assert client.get(f"{PREFIX}/jobs/{JOB_ID}/conf", headers=AS_MALLORY).status_code == 401

    def test_num_unfinished_maps(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/numunfinishedmaps")
        assert resp.status_code == 200
        assert resp.text == f"{JOB_ID}:2"
        assert resp.headers["content-type"].startswith("text/plain")

    def test_status_line(self, client):
        resp = client.get(f"{PREFIX}/jobs/{OTHER_JOB_ID}/status")
        assert resp.text == f"{OTHER_JOB_ID} : SUCCEEDED"


# ============================================================================
# TASKS
# ============================================================================

class TestTasks:

    def test_all_tasks_without_filter(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks")
        assert resp.status_code == 200
        types = [t["type"] for t in resp.json()["tasks"]]
        assert types.count("MAP") == 3
        assert types.count("REDUCE") == 1

    def test_map_filter(self, client):
        tasks = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks", params={"type": "m"}).json()["tasks"]
        assert [t["id"] for t in tasks] == [
            "task_1326232085508_0004_m_000000",
            "task_1326232085508_0004_m_000001",
            "task_1326232085508_0004_m_000002",
        ]

    def test_reduce_filter(self, client):
        tasks = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks", params={"type": "r"}).json()["tasks"]
        assert [t["id"] for t in tasks] == [TASK_R0]

    def test_empty_filter_returns_all(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks", params={"type": ""})
        assert resp.status_code == 200
        assert len(resp.json()["tasks"]) == 4

    def test_invalid_filter_bad_request(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks", params={"type": "x"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "bad_request"
        assert body["detail"] == "tasktype must be either m or r"

    def test_invalid_filter_on_job_without_tasks(self, client):
        resp = client.get(f"{PREFIX}/jobs/{OTHER_JOB_ID}/tasks", params={"type": "x"})
        assert resp.status_code == 400

    def test_tasks_require_view(self, client):
        assert client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks", headers=AS_MALLORY).status_code == 401

    def test_denied_view_logged_with_task_scope(self, client, caplog):
        install_record_scope()
        with caplog.at_level(logging.WARNING, logger="services.access"):
            client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/{TASK_M0}", headers=AS_MALLORY)

        denied = [r for r in caplog.records if r.name == "services.access"]
        assert denied
        assert denied[-1].scope.job_id == JOB_ID
        assert denied[-1].scope.task_id == TASK_M0
        assert denied[-1].scope.caller == "mallory"

    def test_get_task(self, client):
        task = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/{TASK_M0}").json()
        assert task["state"] == "SUCCEEDED"
        assert task["progress"] == 100.0
        assert task["elapsedTime"] == 500
        assert task["successfulAttempt"] == ATTEMPT_M0

    def test_get_task_of_other_job(self, client):
        resp = client.get(f"{PREFIX}/jobs/{OTHER_JOB_ID}/tasks/{TASK_M0}")
        assert resp.status_code == 404

    def test_get_task_malformed(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/task_oops")
        assert resp.status_code == 400
        assert resp.json()["error"] == "malformed"

    def test_task_counters(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/{TASK_M0}/counters")
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == TASK_M0
        group = data["taskCounterGroup"][0]
        assert group["counterGroupName"] == "TaskCounter"
        assert group["counter"] == [{"name": "MAP_INPUT_RECORDS", "value": 10}]

    def test_task_counters_require_view(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/{TASK_M0}/counters", headers=AS_MALLORY)
        assert resp.status_code == 401


# ============================================================================
# ATTEMPTS
# ============================================================================

class TestAttempts:

    def test_map_attempts_generic_shape(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/{TASK_M0}/attempts")
        assert resp.status_code == 200
        attempts = resp.json()["taskAttempts"]
        assert len(attempts) == 1
        attempt = attempts[0]
        assert attempt["id"] == ATTEMPT_M0
        assert attempt["type"] == "MAP"
        assert attempt["rack"] == "/rack1"
        assert attempt["elapsedTime"] == 500
        assert "shuffleFinishTime" not in attempt

    def test_reduce_attempts_phase_shape(self, client):
        attempts = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/{TASK_R0}/attempts").json()["taskAttempts"]
        attempt = attempts[0]
        assert attempt["type"] == "REDUCE"
        assert attempt["shuffleFinishTime"] == 2500
        assert attempt["mergeFinishTime"] == 0
        assert attempt["elapsedShuffleTime"] == 500
        assert attempt["elapsedMergeTime"] == -1
        assert attempt["elapsedReduceTime"] == -1

    def test_get_single_reduce_attempt(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/{TASK_R0}/attempts/{ATTEMPT_R0}")
        assert resp.status_code == 200
        assert resp.json()["elapsedShuffleTime"] == 500

    def test_get_single_map_attempt(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/{TASK_M0}/attempts/{ATTEMPT_M0}")
        assert resp.status_code == 200
        assert resp.json()["assignedContainerId"] == "container_1326232085508_0004_01_000002"

    def test_attempt_of_other_task(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/{TASK_M0}/attempts/{ATTEMPT_R0}")
        assert resp.status_code == 404

    def test_attempt_malformed(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/{TASK_M0}/attempts/attempt_x")
        assert resp.status_code == 400

    def test_attempts_require_view(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/{TASK_M0}/attempts", headers=AS_MALLORY)
        assert resp.status_code == 401

    def test_attempt_counters(self, client):
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}/tasks/{TASK_M0}/attempts/{ATTEMPT_M0}/counters")
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == ATTEMPT_M0
        assert data["taskAttemptCounterGroup"][0]["counter"][0]["value"] == 10

    def test_attempt_counters_require_ancestors_and_view(self, client):
        base = f"{PREFIX}/jobs/{JOB_ID}/tasks"
        missing_task = "task_1326232085508_0004_m_000009"
        assert client.get(
            f"{base}/{missing_task}/attempts/attempt_1326232085508_0004_m_000009_0/counters"
        ).status_code == 404
        assert client.get(
            f"{base}/{TASK_M0}/attempts/{ATTEMPT_M0}/counters", headers=AS_MALLORY
        ).status_code == 401


# ============================================================================
# AUTHENTICATION REQUIRED
# ============================================================================

class TestRequireAuthentication:

    def _client(self, registry):
        defaults = Defaults(
            access=AccessDefaults(require_authentication=True),
            control=ControlDefaults(),
        )
        return TestClient(create_app(registry, defaults))

    def test_anonymous_rejected(self, registry):
        client = self._client(registry)
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}")
        assert resp.status_code == 401

    def test_authenticated_allowed(self, registry):
        client = self._client(registry)
        resp = client.get(f"{PREFIX}/jobs/{JOB_ID}", headers={"X-Remote-User": "bob"})
        assert resp.status_code == 200

    def test_listing_still_returned(self, registry):
        client = self._client(registry)
        jobs = client.get(f"{PREFIX}/jobs").json()["jobs"]
        assert len(jobs) == 2
        assert all(job["hasAccess"] is False for job in jobs)
