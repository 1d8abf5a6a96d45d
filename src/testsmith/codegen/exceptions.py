"""Exceptions for prompt construction and candidate validation."""


class CodegenError(Exception):
    """Base exception for code generation operations."""


class ValidationFailed(CodegenError):
    """Raised when a candidate fails structural validation."""

    def __init__(self, reasons: list[str]) -> None:
        self.reasons = list(reasons)
        super().__init__("; ".join(self.reasons) or "validation failed")
