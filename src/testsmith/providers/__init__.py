"""LLM provider adapters.

Available providers:
    - OpenAIChatProvider: OpenAI and OpenAI-compatible chat completions
      (``openai``, ``perplexity``)
    - GeminiProvider: Google Gemini generate_content (``gemini``)
    - AnthropicProvider: Anthropic Messages API (``anthropic``)

Custom backends subclass ProviderClient and implement ``invoke``.
"""

from testsmith.providers.anthropic_messages import AnthropicProvider
from testsmith.providers.base import ProviderClient, error_for_status, require_api_key
from testsmith.providers.exceptions import (
    AuthFailed,
    CredentialMissing,
    ProviderError,
    ProviderMalformedResponse,
    ProviderRequestError,
    ProviderServerError,
    ProviderUnavailable,
    RateLimited,
)
from testsmith.providers.factory import PROVIDER_CLASSES, create_provider
from testsmith.providers.gemini import GeminiProvider
from testsmith.providers.openai_chat import OpenAIChatProvider

__all__ = [
    "AnthropicProvider",
    "AuthFailed",
    "CredentialMissing",
    "GeminiProvider",
    "OpenAIChatProvider",
    "PROVIDER_CLASSES",
    "ProviderClient",
    "ProviderError",
    "ProviderMalformedResponse",
    "ProviderRequestError",
    "ProviderServerError",
    "ProviderUnavailable",
    "RateLimited",
    "create_provider",
    "error_for_status",
    "require_api_key",
]
