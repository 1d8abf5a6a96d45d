"""Provider and pipeline configuration.

Values come from CLI arguments first, then the process environment (which the
CLI populates from a ``.env`` file via python-dotenv). No API key is ever
defaulted: a missing key stays ``None`` and the provider adapter rejects it.
"""

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

ProviderName = Literal["openai", "perplexity", "gemini", "anthropic"]

SUPPORTED_PROVIDERS: tuple[str, ...] = ("openai", "perplexity", "gemini", "anthropic")
DEFAULT_PROVIDER = "openai"
PROVIDER_ENV_VAR = "TESTSMITH_PROVIDER"
MODEL_ENV_VAR = "TESTSMITH_MODEL"

MAX_ATTEMPTS_LIMIT = 10
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_RATE_LIMIT_DELAY = 5.0
DEFAULT_MAX_INPUT_CHARS = 100_000
DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_TOKENS = 4096
DEFAULT_REQUEST_TIMEOUT = 60.0


class ProviderDefaults(BaseModel):
    model_config = ConfigDict(frozen=True)

    key_env_vars: tuple[str, ...]
    model: str
    base_url: str | None = None


PROVIDER_DEFAULTS: dict[str, ProviderDefaults] = {
    "openai": ProviderDefaults(key_env_vars=("OPENAI_API_KEY",), model="gpt-4o-mini"),
    "perplexity": ProviderDefaults(
        key_env_vars=("PERPLEXITY_API_KEY",),
        model="sonar",
        base_url="https://api.perplexity.ai",
    ),
    "gemini": ProviderDefaults(
        key_env_vars=("GEMINI_API_KEY", "GOOGLE_API_KEY"),
        model="gemini-2.0-flash",
    ),
    "anthropic": ProviderDefaults(
        key_env_vars=("ANTHROPIC_API_KEY",),
        model="claude-sonnet-4-5-20250929",
    ),
}


class ProviderConfig(BaseModel):
    """Everything a provider adapter needs to make one call."""

    model_config = ConfigDict(frozen=True)

    provider: ProviderName
    model: str
    api_key: SecretStr | None = None
    base_url: str | None = None
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=1.0)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    key_env_var: str | None = None  # Used in error messages only

    def secret(self) -> str | None:
        """Return the raw API key, or None when unset."""
        if self.api_key is None:
            return None
        return self.api_key.get_secret_value()


class PipelineConfig(BaseModel):
    """Retry, size and persistence settings for one pipeline run."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay: float = Field(default=DEFAULT_RETRY_DELAY, ge=0.0)
    rate_limit_delay: float = Field(default=DEFAULT_RATE_LIMIT_DELAY, ge=0.0)
    run_timeout: float | None = Field(default=None, gt=0)
    max_input_chars: int = Field(default=DEFAULT_MAX_INPUT_CHARS, gt=0)
    backup: bool = True
    dry_run: bool = False
    skip_validation: bool = False

    @field_validator("max_attempts")
    @classmethod
    def _clamp_attempts(cls, value: int) -> int:
        return clamp_attempts(value)


def clamp_attempts(value: int) -> int:
    """Clamp an attempt count into 1..MAX_ATTEMPTS_LIMIT."""
    return max(1, min(value, MAX_ATTEMPTS_LIMIT))


def resolve_provider_config(
    provider: str | None = None,
    model: str | None = None,
    api_key: str | None = None,
    env: Mapping[str, str] | None = None,
    **overrides,
) -> ProviderConfig:
    """Build a ProviderConfig from explicit values and environment defaults.

    Args:
        provider: Provider name. Falls back to TESTSMITH_PROVIDER, then "openai".
        model: Model identifier. Falls back to TESTSMITH_MODEL, then the
            provider's default model.
        api_key: Explicit API key. Falls back to the provider's env vars.
        env: Environment mapping (defaults to os.environ).
        **overrides: Extra ProviderConfig fields (temperature, max_tokens, ...).

    Returns:
        Frozen ProviderConfig. ``api_key`` may be None; adapters reject that.

    Raises:
        ValueError: If the provider name is not supported.
    """
    env = os.environ if env is None else env
    name = (provider or env.get(PROVIDER_ENV_VAR) or DEFAULT_PROVIDER).strip().lower()
    if name not in PROVIDER_DEFAULTS:
        raise ValueError(
            f"Unsupported provider: {name!r} (expected one of {', '.join(SUPPORTED_PROVIDERS)})"
        )
    defaults = PROVIDER_DEFAULTS[name]

    key = api_key
    if not key:
        for var in defaults.key_env_vars:
            if env.get(var):
                key = env[var]
                break

    overrides.setdefault("base_url", defaults.base_url)
    return ProviderConfig(
        provider=name,
        model=model or env.get(MODEL_ENV_VAR) or defaults.model,
        api_key=SecretStr(key) if key else None,
        key_env_var=defaults.key_env_vars[0],
        **overrides,
    )
