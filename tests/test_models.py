"""Tests for pydantic data models."""

import pytest
from pydantic import ValidationError

from testsmith.models import (
    AttemptRecord,
    CodeCandidate,
    ExtractionMethod,
    GenerationResult,
    GenerationTask,
    PipelineResult,
    RepairTask,
    ValidationResult,
    language_for,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("login.spec.js", "javascript"),
        ("login.spec.ts", "typescript"),
        ("Widget.test.TSX", "typescript"),
        ("noext", "javascript"),
    ],
)
def test_language_for(name, expected):
    assert language_for(name) == expected


def test_repair_task_language_follows_file_name():
    task = RepairTask(original_source="x", failure_log="y", file_name="a.spec.ts")
    assert task.language == "typescript"


def test_tasks_are_frozen():
    task = GenerationTask(description="d", target_name="a.spec.js")
    with pytest.raises(ValidationError):
        task.description = "changed"


def test_candidate_flags():
    fenced = CodeCandidate(source="x", method=ExtractionMethod.FENCED, block_count=1)
    raw = CodeCandidate(source="x", method=ExtractionMethod.RAW)
    empty = CodeCandidate(source="  ", method=ExtractionMethod.EMPTY)

    assert not fenced.is_degraded
    assert raw.is_degraded
    assert empty.is_empty


def test_generation_result_attempt_count():
    result = GenerationResult(
        candidate=CodeCandidate(source="x", method=ExtractionMethod.FENCED),
        validation=ValidationResult(valid=True),
        attempts=[
            AttemptRecord(attempt_number=1, error="bad", error_type="ValidationFailed"),
            AttemptRecord(attempt_number=2),
        ],
    )
    assert result.attempt_count == 2
    assert [a.succeeded for a in result.attempts] == [False, True]


def test_pipeline_result_serializes():
    result = PipelineResult(mode="repair", target_path="a.spec.js", source="x", wrote=True)
    data = result.model_dump(mode="json")
    assert data["mode"] == "repair"
    assert data["backup"] is None
    assert isinstance(data["finished_at"], str)


def test_pipeline_result_rejects_unknown_mode():
    with pytest.raises(ValidationError):
        PipelineResult(mode="delete", target_path="a", source="", wrote=False)
