"""State definition for the LangGraph retry loop."""

import operator
from typing import Annotated, Literal, TypedDict

from testsmith.models import AttemptRecord, CodeCandidate, Prompt, ValidationResult
from testsmith.settings import clamp_attempts

RetryStatus = Literal["pending", "attempting", "success", "exhausted"]


class RetryState(TypedDict):
    """State for one provider -> normalize -> validate retry loop.

    ``attempts`` accumulates across nodes; all other fields overwrite.
    """

    # Input
    prompt: Prompt
    max_attempts: int
    deadline: float | None  # Monotonic clock value, None = unbounded

    # Progress
    attempt: int
    status: RetryStatus

    # Latest attempt outcome
    candidate: CodeCandidate | None
    validation: ValidationResult | None
    last_reason: str
    last_error_type: str | None
    retryable: bool
    retry_after: float | None

    # Diagnostics (accumulating reducer)
    attempts: Annotated[list[AttemptRecord], operator.add]


def make_initial_state(
    prompt: Prompt,
    max_attempts: int = 3,
    deadline: float | None = None,
) -> RetryState:
    """Create the initial Pending state for a retry loop.

    Args:
        prompt: Prompt to send on every attempt.
        max_attempts: Attempt budget, clamped to 1..MAX_ATTEMPTS_LIMIT.
        deadline: Monotonic time after which no further attempt starts.
    """
    return {
        "prompt": prompt,
        "max_attempts": clamp_attempts(max_attempts),
        "deadline": deadline,
        "attempt": 0,
        "status": "pending",
        "candidate": None,
        "validation": None,
        "last_reason": "",
        "last_error_type": None,
        "retryable": True,
        "retry_after": None,
        "attempts": [],
    }
