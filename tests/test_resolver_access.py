# ============================================================================
# RESOLVER AND ACCESS GUARD TESTS
# ============================================================================
# STATUS: Tests - Identifier resolution and view authorization
# PURPOSE: Verify lookup short-circuits, ancestry checks and ACL decisions
# CREATED: 11 OCT 2026
# ============================================================================
"""
Resolver and Access Guard Tests

Run with:
    pytest tests/test_resolver_access.py -v
"""

import pytest
from unittest.mock import MagicMock

from core.contracts import JobACL
from core.errors import MalformedError, NotFoundError, UnauthorizedError
from core.ids import parse_attempt_id, parse_job_id, parse_task_id
from core.models import AccessControlList, JobSummary
from repositories import JobRegistry
from services import AccessGuard, JobResolver

from tests.conftest import JOB_ID, MISSING_JOB_ID, OTHER_JOB_ID


# ============================================================================
# RESOLVER
# ============================================================================

class TestResolveJob:

    def test_resolves_full_view(self, registry):
        job = JobResolver(registry).resolve_job_string(JOB_ID)
        assert str(job.job_id) == JOB_ID
        assert job.user == "alice"

    def test_missing_job_not_found(self, registry):
        with pytest.raises(NotFoundError) as exc_info:
            JobResolver(registry).resolve_job_string(MISSING_JOB_ID)
        assert exc_info.value.job_id == MISSING_JOB_ID

    def test_malformed_before_lookup(self):
        registry = MagicMock(spec=JobRegistry)
        with pytest.raises(MalformedError):
            JobResolver(registry).resolve_job_string("job_nope")
        registry.get_full.assert_not_called()

    def test_lookup_uses_exact_identifier(self, registry):
        job = JobResolver(registry).resolve_job(parse_job_id(OTHER_JOB_ID))
        assert str(job.job_id) == OTHER_JOB_ID

    def test_partial_entry_without_full_view(self):
        job_id = parse_job_id(JOB_ID)
        registry = MagicMock(spec=JobRegistry)
        registry.list_partial.return_value = [(job_id, JobSummary(job_id=job_id))]
        registry.get_full.return_value = None

        resolver = JobResolver(registry)
        assert resolver.list_jobs() == []
        with pytest.raises(NotFoundError):
            resolver.resolve_job(job_id)


class TestListJobs:

    def test_lists_every_full_job(self, registry):
        ids = sorted(str(job.job_id) for job in JobResolver(registry).list_jobs())
        assert ids == [JOB_ID, OTHER_JOB_ID]

    def test_listing_does_not_mutate_registry(self, registry):
        before = registry.list_partial()
        JobResolver(registry).list_jobs()
        assert registry.list_partial() == before


class TestResolveTaskAndAttempt:

    def test_resolves_task(self, registry):
        resolver = JobResolver(registry)
        job = resolver.resolve_job_string(JOB_ID)
        task = resolver.resolve_task_string(job, "task_1326232085508_0004_m_000001")
        assert task.task_id == parse_task_id("task_1326232085508_0004_m_000001")

    def test_missing_task(self, registry):
        resolver = JobResolver(registry)
        job = resolver.resolve_job_string(JOB_ID)
        with pytest.raises(NotFoundError):
            resolver.resolve_task_string(job, "task_1326232085508_0004_m_000009")

    def test_task_of_another_job_not_found(self, registry):
        resolver = JobResolver(registry)
        other = resolver.resolve_job_string(OTHER_JOB_ID)
        # Exists under JOB_ID, not under OTHER_JOB_ID
        with pytest.raises(NotFoundError):
            resolver.resolve_task(other, parse_task_id("task_1326232085508_0004_m_000000"))

    def test_malformed_task_id(self, registry):
        resolver = JobResolver(registry)
        job = resolver.resolve_job_string(JOB_ID)
        with pytest.raises(MalformedError):
            resolver.resolve_task_string(job, "task_1326232085508_0004_q_000000")

    def test_resolves_attempt(self, registry):
        resolver = JobResolver(registry)
        job = resolver.resolve_job_string(JOB_ID)
        task = resolver.resolve_task_string(job, "task_1326232085508_0004_m_000000")
        attempt = resolver.resolve_attempt_string(task, "attempt_1326232085508_0004_m_000000_0")
        assert attempt.attempt_id == parse_attempt_id("attempt_1326232085508_0004_m_000000_0")

    def test_attempt_of_another_task_not_found(self, registry):
        resolver = JobResolver(registry)
        job = resolver.resolve_job_string(JOB_ID)
        task = resolver.resolve_task_string(job, "task_1326232085508_0004_m_000000")
        with pytest.raises(NotFoundError):
            resolver.resolve_attempt_string(task, "attempt_1326232085508_0004_m_000001_0")


# ============================================================================
# ACCESS GUARD
# ============================================================================

class TestAccessGuard:

    def _job(self, registry, job_id=JOB_ID):
        return JobResolver(registry).resolve_job_string(job_id)

    def test_no_caller_allowed_by_default(self, registry):
        guard = AccessGuard()
        job = self._job(registry, OTHER_JOB_ID)
        assert guard.can_view(job, None) is True
        guard.enforce_view(job, None)

    def test_owner_allowed(self, registry):
        assert AccessGuard().can_view(self._job(registry), "alice") is True

    def test_acl_user_allowed(self, registry):
        assert AccessGuard().can_view(self._job(registry), "bob") is True

    def test_other_user_denied(self, registry):
        guard = AccessGuard()
        job = self._job(registry)
        assert guard.can_view(job, "mallory") is False
        with pytest.raises(UnauthorizedError) as exc_info:
            guard.enforce_view(job, "mallory")
        assert exc_info.value.caller == "mallory"
        assert exc_info.value.job_id == JOB_ID

    def test_wildcard_acl(self, registry):
        job = self._job(registry)
        job.update(acls={JobACL.VIEW_JOB: AccessControlList.parse("*")})
        assert AccessGuard().can_view(job, "anyone") is True

    def test_missing_acl_entry_only_owner(self, registry):
        job = self._job(registry)
        job.update(acls={})
        guard = AccessGuard()
        assert guard.can_view(job, "alice") is True
        assert guard.can_view(job, "bob") is False

    def test_require_authentication(self, registry):
        guard = AccessGuard(require_authentication=True)
        job = self._job(registry)
        assert guard.can_view(job, None) is False
        with pytest.raises(UnauthorizedError, match="Authentication required"):
            guard.enforce_view(job, None)
        assert guard.can_view(job, "bob") is True


class TestAccessControlList:

    def test_parse_users_and_groups(self):
        acl = AccessControlList.parse("alice,bob analysts")
        assert acl.users == frozenset({"alice", "bob"})
        assert acl.groups == frozenset({"analysts"})
        assert acl.is_user_allowed("carol", groups=["analysts"])
        assert not acl.is_user_allowed("carol")

    def test_str(self):
        assert str(AccessControlList.parse("bob,alice ops")) == "alice,bob ops"
        assert str(AccessControlList.parse("*")) == "*"
        assert str(AccessControlList.parse("")) == ""
