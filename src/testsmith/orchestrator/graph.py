"""LangGraph retry loop: provider call -> normalize -> validate, with backoff.

State machine: Pending -> Attempting -> {Success | Attempting(next) | Exhausted}.

Edge topology:
  START -> attempt_node
  attempt_node -> conditional(decide_fn) -> {END, wait_node, exhausted_node}
  wait_node -> attempt_node
  exhausted_node -> END
"""

import logging
import time
from typing import Callable

from langgraph.graph import END, START, StateGraph

from testsmith.codegen.exceptions import ValidationFailed
from testsmith.codegen.output_validator import EMPTY_REASON, OutputValidator
from testsmith.codegen.response_normalizer import ResponseNormalizer
from testsmith.models import AttemptRecord, GenerationResult, Prompt, ValidationResult
from testsmith.orchestrator.exceptions import GenerationFailed, GraphBuildError
from testsmith.orchestrator.recovery import (
    clip_delay,
    compute_retry_delay,
    decide_next,
    remaining_time,
)
from testsmith.orchestrator.state import RetryState, make_initial_state
from testsmith.providers.base import ProviderClient
from testsmith.providers.exceptions import CredentialMissing, ProviderError
from testsmith.settings import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RATE_LIMIT_DELAY,
    DEFAULT_RETRY_DELAY,
    PipelineConfig,
    clamp_attempts,
)

logger = logging.getLogger(__name__)

# Graph steps per attempt (attempt_node + wait_node), plus slack for start/end
STEPS_PER_ATTEMPT = 2
RECURSION_SLACK = 5


def make_attempt_node(
    provider: ProviderClient,
    normalizer: ResponseNormalizer,
    validator: OutputValidator,
    clock: Callable[[], float],
    skip_validation: bool = False,
) -> Callable[[RetryState], dict]:
    """Factory: returns a node closure that runs one attempt.

    The closure:
    1. Invokes the provider with the time left before the run deadline
    2. Normalizes the reply into a CodeCandidate
    3. Validates the candidate (or only rejects empty ones if skip_validation)
    4. Returns status "success", or "attempting" with the failure recorded

    Provider errors are recorded, not raised. CredentialMissing propagates:
    no retry can fix a missing key.
    """

    def attempt_node(state: RetryState) -> dict:
        attempt = state["attempt"] + 1
        started = clock()
        logger.info(
            "Attempt %d/%d using %s (%s)...",
            attempt,
            state["max_attempts"],
            provider.name,
            provider.model,
        )

        try:
            reply = provider.invoke(
                state["prompt"],
                timeout=remaining_time(state["deadline"], started),
            )
        except CredentialMissing:
            raise
        except ProviderError as exc:
            reason = f"{type(exc).__name__}: {exc}"
            logger.warning("Attempt %d failed: %s", attempt, reason)
            return {
                "attempt": attempt,
                "status": "attempting",
                "last_reason": reason,
                "last_error_type": type(exc).__name__,
                "retryable": exc.retryable,
                "retry_after": getattr(exc, "retry_after", None),
                "attempts": [
                    AttemptRecord(
                        attempt_number=attempt,
                        error=str(exc),
                        error_type=type(exc).__name__,
                        duration_seconds=clock() - started,
                    )
                ],
            }

        candidate = normalizer.extract(reply.text)
        if skip_validation:
            validation = ValidationResult(
                valid=not candidate.is_empty,
                reasons=[EMPTY_REASON] if candidate.is_empty else [],
                warnings=["Structural validation skipped"],
            )
        else:
            validation = validator.check(candidate)
        for warning in validation.warnings:
            logger.debug("Attempt %d warning: %s", attempt, warning)

        update = {
            "attempt": attempt,
            "candidate": candidate,
            "validation": validation,
            "retry_after": None,
            "retryable": True,
        }
        if validation.valid:
            logger.info("Attempt %d produced a valid candidate (%s)", attempt, candidate.method.value)
            update["status"] = "success"
            update["last_reason"] = ""
            update["last_error_type"] = None
            update["attempts"] = [
                AttemptRecord(attempt_number=attempt, duration_seconds=clock() - started)
            ]
            return update

        failure = ValidationFailed(validation.reasons)
        reason = f"ValidationFailed: {failure}"
        logger.warning("Attempt %d failed: %s", attempt, reason)
        update["status"] = "attempting"
        update["last_reason"] = reason
        update["last_error_type"] = "ValidationFailed"
        update["attempts"] = [
            AttemptRecord(
                attempt_number=attempt,
                error=str(failure),
                error_type="ValidationFailed",
                duration_seconds=clock() - started,
            )
        ]
        return update

    return attempt_node


def make_decide_fn(
    retry_delay: float,
    rate_limit_delay: float,
    clock: Callable[[], float],
) -> Callable[[RetryState], str]:
    """Factory: returns the router for the post-attempt conditional edge.

    Returns:
        Callable that returns one of: "success", "retry", "abort"
    """

    def decide_fn(state: RetryState) -> str:
        delay = compute_retry_delay(
            state["last_error_type"], state["retry_after"], retry_delay, rate_limit_delay
        )
        return decide_next(state, delay, remaining_time(state["deadline"], clock()))

    return decide_fn


def make_wait_node(
    retry_delay: float,
    rate_limit_delay: float,
    sleep: Callable[[float], None],
    clock: Callable[[], float],
) -> Callable[[RetryState], dict]:
    """Factory: returns a node closure that sleeps before the next attempt.

    The delay is fixed (``retry_delay``), longer for rate limits, and never
    extends past the run deadline.
    """

    def wait_node(state: RetryState) -> dict:
        delay = compute_retry_delay(
            state["last_error_type"], state["retry_after"], retry_delay, rate_limit_delay
        )
        delay = clip_delay(delay, remaining_time(state["deadline"], clock()))
        if delay > 0:
            logger.info("Retrying in %.1fs...", delay)
            sleep(delay)
        return {"status": "attempting"}

    return wait_node


def make_exhausted_node(clock: Callable[[], float]) -> Callable[[RetryState], dict]:
    """Factory: returns a node closure that marks the loop Exhausted.

    Annotates the last failure reason when the run deadline ended the loop.
    """

    def exhausted_node(state: RetryState) -> dict:
        reason = state["last_reason"] or "no attempt completed"
        remaining = remaining_time(state["deadline"], clock())
        if (
            state["retryable"]
            and state["attempt"] < state["max_attempts"]
            and remaining is not None
        ):
            reason = f"run timeout reached; last failure: {reason}"
        return {"status": "exhausted", "last_reason": reason}

    return exhausted_node


def build_retry_graph(
    provider: ProviderClient,
    normalizer: ResponseNormalizer,
    validator: OutputValidator,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    rate_limit_delay: float = DEFAULT_RATE_LIMIT_DELAY,
    skip_validation: bool = False,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
):
    """Build and compile the retry StateGraph.

    No checkpointer (in-memory state only).

    Returns:
        CompiledStateGraph ready to invoke.

    Raises:
        GraphBuildError: If graph construction fails.
    """
    try:
        graph = StateGraph(RetryState)

        graph.add_node(
            "attempt_node",
            make_attempt_node(provider, normalizer, validator, clock, skip_validation),
        )
        graph.add_node("wait_node", make_wait_node(retry_delay, rate_limit_delay, sleep, clock))
        graph.add_node("exhausted_node", make_exhausted_node(clock))

        graph.add_edge(START, "attempt_node")
        graph.add_conditional_edges(
            "attempt_node",
            make_decide_fn(retry_delay, rate_limit_delay, clock),
            {
                "success": END,
                "retry": "wait_node",
                "abort": "exhausted_node",
            },
        )
        graph.add_edge("wait_node", "attempt_node")
        graph.add_edge("exhausted_node", END)

        return graph.compile()

    except Exception as exc:
        raise GraphBuildError(f"Failed to build retry graph: {exc}") from exc


class RetryController:
    """Runs the retry graph for one prompt and reports the outcome."""

    def __init__(
        self,
        provider: ProviderClient,
        normalizer: ResponseNormalizer | None = None,
        validator: OutputValidator | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        rate_limit_delay: float = DEFAULT_RATE_LIMIT_DELAY,
        run_timeout: float | None = None,
        skip_validation: bool = False,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.provider = provider
        self.max_attempts = clamp_attempts(max_attempts)
        self.run_timeout = run_timeout
        self._clock = clock
        self._graph = build_retry_graph(
            provider=provider,
            normalizer=normalizer or ResponseNormalizer(),
            validator=validator or OutputValidator(),
            retry_delay=retry_delay,
            rate_limit_delay=rate_limit_delay,
            skip_validation=skip_validation,
            sleep=sleep,
            clock=clock,
        )

    @classmethod
    def from_config(cls, provider: ProviderClient, config: PipelineConfig, **kwargs) -> "RetryController":
        return cls(
            provider,
            max_attempts=config.max_attempts,
            retry_delay=config.retry_delay,
            rate_limit_delay=config.rate_limit_delay,
            run_timeout=config.run_timeout,
            skip_validation=config.skip_validation,
            **kwargs,
        )

    def run(self, prompt: Prompt, max_attempts: int | None = None) -> GenerationResult:
        """Attempt generation until a candidate validates or the budget runs out.

        Args:
            prompt: Prompt to send on every attempt.
            max_attempts: Overrides the controller's attempt budget.

        Returns:
            GenerationResult with the valid candidate and every AttemptRecord.

        Raises:
            GenerationFailed: After exhausting attempts, hitting the run
                timeout, or a non-retryable provider error.
            CredentialMissing: If the provider reports a missing key.
        """
        budget = clamp_attempts(max_attempts if max_attempts is not None else self.max_attempts)
        deadline = None
        if self.run_timeout is not None:
            deadline = self._clock() + self.run_timeout

        state = make_initial_state(prompt, max_attempts=budget, deadline=deadline)
        result = self._graph.invoke(
            state,
            config={"recursion_limit": budget * STEPS_PER_ATTEMPT + RECURSION_SLACK},
        )

        if result["status"] != "success":
            raise GenerationFailed(
                attempts=result["attempt"],
                last_reason=result["last_reason"],
                records=result["attempts"],
            )

        return GenerationResult(
            candidate=result["candidate"],
            validation=result["validation"],
            attempts=result["attempts"],
        )
