"""Prompt construction, reply normalization and candidate validation."""

from testsmith.codegen.exceptions import CodegenError, ValidationFailed
from testsmith.codegen.output_validator import OutputValidator
from testsmith.codegen.prompt_builder import PromptBuilder
from testsmith.codegen.response_normalizer import ResponseNormalizer

__all__ = [
    "CodegenError",
    "OutputValidator",
    "PromptBuilder",
    "ResponseNormalizer",
    "ValidationFailed",
]
