"""Task input and prompt models."""

from pathlib import PurePath
from typing import Literal

from pydantic import BaseModel, ConfigDict

TYPESCRIPT_SUFFIXES = frozenset({".ts", ".tsx", ".mts", ".cts"})


def language_for(file_name: str) -> Literal["javascript", "typescript"]:
    """Infer the test source language from a file name's suffix."""
    if PurePath(file_name).suffix.lower() in TYPESCRIPT_SUFFIXES:
        return "typescript"
    return "javascript"


class GenerationTask(BaseModel):
    """Plain-language test intent to turn into a new test file."""

    model_config = ConfigDict(frozen=True)

    description: str
    target_name: str  # File name of the spec to generate, e.g. "login.spec.js"
    language: Literal["javascript", "typescript"] = "javascript"


class RepairTask(BaseModel):
    """Failing test source plus the error log describing its failure."""

    model_config = ConfigDict(frozen=True)

    original_source: str
    failure_log: str
    file_name: str

    @property
    def language(self) -> Literal["javascript", "typescript"]:
        return language_for(self.file_name)


TaskInput = GenerationTask | RepairTask


class Prompt(BaseModel):
    """Role-structured instructions sent to a provider."""

    model_config = ConfigDict(frozen=True)

    system_instruction: str
    user_instruction: str

    def as_single_text(self) -> str:
        """Join both roles for providers that accept a single text blob."""
        return f"{self.system_instruction}\n\n{self.user_instruction}"
