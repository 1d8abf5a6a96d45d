"""Abstract interface for LLM provider adapters.

Each adapter owns its request schema, authentication and response envelope,
and exposes a single capability: turn a Prompt into a ProviderReply with
exactly one outbound call. Retrying is the orchestrator's job, never the
adapter's, so SDK-level retries are disabled.
"""

import re
from abc import ABC, abstractmethod
from typing import Any

from testsmith.models import Prompt, ProviderReply
from testsmith.providers.exceptions import (
    AuthFailed,
    CredentialMissing,
    ProviderError,
    ProviderRequestError,
    ProviderServerError,
    RateLimited,
)
from testsmith.settings import ProviderConfig

PLACEHOLDER_KEY_RE = re.compile(
    r"^(?:your[-_ ].*|.*[-_]here|<.*>|changeme|change-me|placeholder|dummy|x+|\*+)$",
    re.IGNORECASE,
)
MAX_ERROR_DETAIL = 300


def is_placeholder_key(value: str) -> bool:
    return bool(PLACEHOLDER_KEY_RE.match(value.strip()))


def require_api_key(config: ProviderConfig) -> str:
    """Return the configured API key or fail before any network call.

    Raises:
        CredentialMissing: If the key is unset, blank, or an obvious placeholder.
    """
    key = config.secret()
    env_hint = f" Set {config.key_env_var} or pass --api-key." if config.key_env_var else ""
    if key is None or not key.strip():
        raise CredentialMissing(f"No API key configured for provider '{config.provider}'.{env_hint}")
    if is_placeholder_key(key):
        raise CredentialMissing(
            f"API key for provider '{config.provider}' is a placeholder value.{env_hint}"
        )
    return key


def retry_after_seconds(headers: Any) -> float | None:
    """Parse a numeric Retry-After header, if present."""
    if headers is None:
        return None
    try:
        value = headers.get("retry-after")
    except AttributeError:
        return None
    if value is None:
        return None
    try:
        return max(0.0, float(value))
    except (TypeError, ValueError):
        return None


def error_for_status(
    status_code: int | None,
    message: str,
    retry_after: float | None = None,
) -> ProviderError:
    """Map an HTTP status code onto the shared provider taxonomy."""
    detail = message[:MAX_ERROR_DETAIL]
    if status_code in (401, 403):
        return AuthFailed(f"Authentication failed ({status_code}): {detail}", status_code)
    if status_code == 429:
        return RateLimited(
            f"Rate limit exceeded: {detail}", status_code, retry_after=retry_after
        )
    if status_code is not None and status_code >= 500:
        return ProviderServerError(f"Server error ({status_code}): {detail}", status_code)
    return ProviderRequestError(f"Request rejected ({status_code}): {detail}", status_code)


class ProviderClient(ABC):
    """Capability interface shared by every LLM backend.

    Example:
        class MyProvider(ProviderClient):
            def invoke(self, prompt, timeout=None):
                text = call_my_backend(prompt.as_single_text())
                return self._reply(text)
    """

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config
        self.api_key = require_api_key(config)

    @property
    def name(self) -> str:
        return self.config.provider

    @property
    def model(self) -> str:
        return self.config.model

    def _timeout(self, timeout: float | None) -> float:
        if timeout is None:
            return self.config.request_timeout
        return max(0.001, min(timeout, self.config.request_timeout))

    def _reply(self, text: str) -> ProviderReply:
        return ProviderReply(text=text, provider=self.name, model=self.model)

    @abstractmethod
    def invoke(self, prompt: Prompt, timeout: float | None = None) -> ProviderReply:
        """Send the prompt to the backend and return its raw text reply.

        Args:
            prompt: System and user instructions.
            timeout: Upper bound in seconds for this call (clipped to the
                configured request timeout).

        Returns:
            ProviderReply with the backend's generated text.

        Raises:
            AuthFailed, RateLimited, ProviderServerError, ProviderUnavailable,
            ProviderRequestError, ProviderMalformedResponse.
        """
