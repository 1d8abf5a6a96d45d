"""Select a provider adapter from configuration."""

from testsmith.providers.anthropic_messages import AnthropicProvider
from testsmith.providers.base import ProviderClient
from testsmith.providers.gemini import GeminiProvider
from testsmith.providers.openai_chat import OpenAIChatProvider
from testsmith.settings import ProviderConfig

PROVIDER_CLASSES: dict[str, type[ProviderClient]] = {
    "openai": OpenAIChatProvider,
    "perplexity": OpenAIChatProvider,
    "gemini": GeminiProvider,
    "anthropic": AnthropicProvider,
}


def create_provider(config: ProviderConfig) -> ProviderClient:
    """Instantiate the adapter for ``config.provider``.

    Raises:
        CredentialMissing: If the config carries no usable API key.
        ValueError: If the provider name has no adapter.
    """
    provider_cls = PROVIDER_CLASSES.get(config.provider)
    if provider_cls is None:
        raise ValueError(f"Unsupported provider: {config.provider}")
    return provider_cls(config)
