# ============================================================================
# IDENTIFIER CODEC TESTS
# ============================================================================
# STATUS: Tests - Job / task / attempt identifier parsing
# PURPOSE: Verify canonical parsing, formatting and rejection of bad ids
# CREATED: 11 OCT 2026
# ============================================================================
"""
Identifier Codec Tests

Run with:
    pytest tests/test_ids.py -v
"""

import pytest

from core.contracts import TaskType
from core.errors import MalformedError
from core.ids import (
    JobId,
    TaskAttemptId,
    TaskId,
    parse_attempt_id,
    parse_job_id,
    parse_task_id,
    parse_task_type,
)


# ============================================================================
# WELL-FORMED IDS
# ============================================================================

class TestParseValid:

    def test_job_id_components(self):
        job_id = parse_job_id("job_1326232085508_0004")
        assert job_id == JobId(cluster_timestamp=1326232085508, sequence=4)

    def test_task_id_embeds_job(self):
        task_id = parse_task_id("task_1326232085508_0004_r_000012")
        assert task_id.job_id == parse_job_id("job_1326232085508_0004")
        assert task_id.task_type == TaskType.REDUCE
        assert task_id.sequence == 12

    def test_attempt_id_embeds_task(self):
        attempt_id = parse_attempt_id("attempt_1326232085508_0004_m_000003_2")
        assert attempt_id.task_id == parse_task_id("task_1326232085508_0004_m_000003")
        assert attempt_id.job_id == parse_job_id("job_1326232085508_0004")
        assert attempt_id.sequence == 2

    @pytest.mark.parametrize("value", [
        "job_1326232085508_0004",
        "job_0_0000",
        "job_1326232085508_12345",
        "task_1326232085508_0004_m_000000",
        "task_1326232085508_0004_r_1234567",
        "attempt_1326232085508_0004_m_000003_0",
        "attempt_1326232085508_0004_r_000003_17",
    ])
    def test_parse_then_format_is_identity(self, value):
        parser = {
            "job": parse_job_id,
            "task": parse_task_id,
            "attempt": parse_attempt_id,
        }[value.split("_", 1)[0]]
        assert str(parser(value)) == value

    def test_format_then_parse_is_identity(self):
        attempt_id = TaskAttemptId(
            task_id=TaskId(
                job_id=JobId(cluster_timestamp=42, sequence=7),
                task_type=TaskType.MAP,
                sequence=9,
            ),
            sequence=1,
        )
        assert parse_attempt_id(str(attempt_id)) == attempt_id

    def test_ids_are_hashable_and_ordered(self):
        a = parse_task_id("task_1_0001_m_000001")
        b = parse_task_id("task_1_0001_m_000002")
        assert len({a, b, parse_task_id("task_1_0001_m_000001")}) == 2
        assert sorted([b, a]) == [a, b]


# ============================================================================
# MALFORMED IDS
# ============================================================================

class TestParseMalformed:

    @pytest.mark.parametrize("value", [
        "",
        "job",
        "job_",
        "job_abc_0004",
        "job_1326232085508_04",
        "job_01326232085508_0004",
        "job_1326232085508_01234",
        "job_1326232085508_0004_extra",
        " job_1326232085508_0004",
        "JOB_1326232085508_0004",
        "job_-1_0004",
        "job_1326232085508_٠٠٠٤",
    ])
    def test_bad_job_ids(self, value):
        with pytest.raises(MalformedError):
            parse_job_id(value)

    @pytest.mark.parametrize("value", [
        "task_1326232085508_0004_x_000000",
        "task_1326232085508_0004_m_00000",
        "task_1326232085508_0004_m",
        "job_1326232085508_0004",
        "attempt_1326232085508_0004_m_000000_0",
    ])
    def test_bad_task_ids(self, value):
        with pytest.raises(MalformedError):
            parse_task_id(value)

    @pytest.mark.parametrize("value", [
        "attempt_1326232085508_0004_m_000000",
        "attempt_1326232085508_0004_m_000000_01",
        "attempt_1326232085508_0004_m_000000_x",
        "task_1326232085508_0004_m_000000",
    ])
    def test_bad_attempt_ids(self, value):
        with pytest.raises(MalformedError):
            parse_attempt_id(value)

    def test_non_string_rejected(self):
        with pytest.raises(MalformedError):
            parse_job_id(None)

    def test_sequence_out_of_range(self):
        with pytest.raises(MalformedError, match="out of range"):
            parse_job_id("job_1326232085508_2147483648")

    def test_timestamp_out_of_range(self):
        with pytest.raises(MalformedError, match="out of range"):
            parse_job_id("job_9223372036854775808_0001")

    def test_largest_values_accepted(self):
        job_id = parse_job_id("job_9223372036854775807_2147483647")
        assert job_id.sequence == 2147483647

    def test_malformed_carries_value(self):
        with pytest.raises(MalformedError) as exc_info:
            parse_task_id("task_bad")
        assert exc_info.value.value == "task_bad"
        assert exc_info.value.status_code == 400


# ============================================================================
# TASK TYPE FILTER
# ============================================================================

class TestTaskType:

    def test_symbols(self):
        assert parse_task_type("m") == TaskType.MAP
        assert parse_task_type("r") == TaskType.REDUCE
        assert TaskType.MAP.symbol == "m"

    @pytest.mark.parametrize("value", ["x", "M", "map", ""])
    def test_other_values_rejected(self, value):
        with pytest.raises(MalformedError, match="tasktype must be either m or r"):
            parse_task_type(value)

    def test_constructor_range_check(self):
        with pytest.raises(ValueError):
            JobId(cluster_timestamp=1, sequence=-1)
