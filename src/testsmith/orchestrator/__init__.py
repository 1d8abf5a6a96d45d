"""Retry orchestration and end-to-end pipelines."""

from testsmith.orchestrator.exceptions import (
    GenerationFailed,
    GraphBuildError,
    OrchestratorError,
)
from testsmith.orchestrator.graph import RetryController, build_retry_graph
from testsmith.orchestrator.pipeline import TestPipeline
from testsmith.orchestrator.state import RetryState, make_initial_state

__all__ = [
    "GenerationFailed",
    "GraphBuildError",
    "OrchestratorError",
    "RetryController",
    "RetryState",
    "TestPipeline",
    "build_retry_graph",
    "make_initial_state",
]
