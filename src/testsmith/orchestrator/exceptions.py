"""Exceptions for orchestrator operations."""


class OrchestratorError(Exception):
    """Base exception for all orchestrator operations."""


class GraphBuildError(OrchestratorError):
    """Raised when graph construction fails."""


class GenerationFailed(OrchestratorError):
    """Raised when no valid candidate was produced within the attempt budget."""

    def __init__(self, attempts: int, last_reason: str, records: list | None = None) -> None:
        self.attempts = attempts
        self.last_reason = last_reason
        self.records = list(records or [])
        super().__init__(
            f"Failed to generate valid code after {attempts} attempt(s): {last_reason}"
        )
