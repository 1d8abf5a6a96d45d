"""Exceptions for LLM provider operations.

Every adapter maps its SDK's transport and status errors onto this taxonomy
so callers never see raw SDK exceptions.
"""


class ProviderError(Exception):
    """Base exception for all provider operations."""

    retryable: bool = True

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CredentialMissing(ProviderError):
    """Raised when no usable API key is configured."""

    retryable = False


class AuthFailed(ProviderError):
    """Raised on HTTP 401/403 from the provider."""

    retryable = False


class RateLimited(ProviderError):
    """Raised on HTTP 429 from the provider."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 429,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


class ProviderServerError(ProviderError):
    """Raised on HTTP 5xx from the provider."""


class ProviderUnavailable(ProviderError):
    """Raised when the provider cannot be reached or the call times out."""


class ProviderRequestError(ProviderError):
    """Raised on any other HTTP 4xx (bad request, unknown model, ...)."""

    retryable = False


class ProviderMalformedResponse(ProviderError):
    """Raised when the response envelope lacks the expected text fields."""
