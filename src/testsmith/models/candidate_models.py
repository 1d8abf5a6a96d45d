"""Models for provider replies, extracted candidates and validation."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProviderReply(BaseModel):
    """Raw text extracted from a provider's response envelope."""

    model_config = ConfigDict(frozen=True)

    text: str
    provider: str
    model: str


class ExtractionMethod(str, Enum):
    """How a candidate was recovered from a raw reply."""

    FENCED = "fenced"        # Longest fenced code block
    ANCHORED = "anchored"    # Anchor scan: first import/test to last closing brace
    RAW = "raw"              # Whole trimmed reply
    EMPTY = "empty"          # Reply had no content


class CodeCandidate(BaseModel):
    """Best-effort pure source recovered from a model reply."""

    model_config = ConfigDict(frozen=True)

    source: str
    method: ExtractionMethod
    block_count: int = 0  # Number of fenced blocks seen in the reply

    @property
    def is_empty(self) -> bool:
        return not self.source.strip()

    @property
    def is_degraded(self) -> bool:
        return self.method != ExtractionMethod.FENCED


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    reasons: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
