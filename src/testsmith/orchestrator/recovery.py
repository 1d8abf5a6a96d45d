"""Pure helper functions for retry decisions.

All functions are stateless and have no external dependencies.
"""

from testsmith.orchestrator.state import RetryState

RATE_LIMITED_ERROR = "RateLimited"


def remaining_time(deadline: float | None, now: float) -> float | None:
    """Seconds left before ``deadline``, or None when there is no deadline."""
    if deadline is None:
        return None
    return deadline - now


def compute_retry_delay(
    error_type: str | None,
    retry_after: float | None,
    retry_delay: float,
    rate_limit_delay: float,
) -> float:
    """Delay before the next attempt.

    Rate-limit errors wait for the provider's Retry-After hint when given,
    otherwise ``rate_limit_delay``. Everything else waits ``retry_delay``.
    """
    if error_type == RATE_LIMITED_ERROR:
        if retry_after is not None:
            return max(retry_after, retry_delay)
        return max(rate_limit_delay, retry_delay)
    return retry_delay


def clip_delay(delay: float, remaining: float | None) -> float:
    """Never wait past the run deadline."""
    if remaining is None:
        return max(0.0, delay)
    return max(0.0, min(delay, remaining))


def decide_next(state: RetryState, delay: float, remaining: float | None) -> str:
    """Router for the post-attempt conditional edge.

    Returns:
        "success" if the last attempt produced a valid candidate,
        "retry" if budget, retryability and deadline all allow another attempt,
        "abort" otherwise.
    """
    if state["status"] == "success":
        return "success"
    if not state["retryable"]:
        return "abort"
    if state["attempt"] >= state["max_attempts"]:
        return "abort"
    if remaining is not None and remaining - delay <= 0:
        return "abort"
    return "retry"
