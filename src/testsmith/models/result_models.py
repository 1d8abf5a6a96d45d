"""Models describing attempts, backups and pipeline outcomes."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from testsmith.models.candidate_models import CodeCandidate, ValidationResult


class AttemptRecord(BaseModel):
    """Diagnostics for a single provider -> normalize -> validate attempt."""

    model_config = ConfigDict(frozen=True)

    attempt_number: int
    error: str | None = None
    error_type: str | None = None  # Exception class name or "ValidationFailed"
    duration_seconds: float | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class BackupDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    original_path: str
    backup_path: str
    created_at: datetime = Field(default_factory=datetime.now)


class GenerationResult(BaseModel):
    """Successful outcome of the retry loop."""

    model_config = ConfigDict(frozen=True)

    candidate: CodeCandidate
    validation: ValidationResult
    attempts: list[AttemptRecord] = Field(default_factory=list)

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)


class SinkResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_path: str
    wrote: bool
    dry_run: bool = False
    backup: BackupDescriptor | None = None


class PipelineResult(BaseModel):
    """Outcome of one generate or repair run, reported by the CLI."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["generate", "repair"]
    target_path: str
    source: str
    wrote: bool
    dry_run: bool = False
    backup: BackupDescriptor | None = None
    attempts: list[AttemptRecord] = Field(default_factory=list)
    finished_at: datetime = Field(default_factory=datetime.now)
