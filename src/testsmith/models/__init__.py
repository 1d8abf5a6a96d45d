"""Data models for testsmith."""

from testsmith.models.candidate_models import (
    CodeCandidate,
    ExtractionMethod,
    ProviderReply,
    ValidationResult,
)
from testsmith.models.result_models import (
    AttemptRecord,
    BackupDescriptor,
    GenerationResult,
    PipelineResult,
    SinkResult,
)
from testsmith.models.task_models import (
    GenerationTask,
    Prompt,
    RepairTask,
    TaskInput,
    language_for,
)

__all__ = [
    "AttemptRecord",
    "BackupDescriptor",
    "CodeCandidate",
    "ExtractionMethod",
    "GenerationResult",
    "GenerationTask",
    "PipelineResult",
    "Prompt",
    "ProviderReply",
    "RepairTask",
    "SinkResult",
    "TaskInput",
    "ValidationResult",
    "language_for",
]
