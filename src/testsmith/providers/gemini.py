"""Google Gemini provider.

Gemini takes a single text prompt, authenticates with an API key, and nests
the generated text under ``candidates[0].content.parts[0].text``. The client
is per-instance (``genai.Client``), so no credential is configured globally.
"""

import logging

import httpx
from google import genai
from google.genai import errors, types

from testsmith.models import Prompt, ProviderReply
from testsmith.providers.base import ProviderClient, error_for_status
from testsmith.providers.exceptions import ProviderMalformedResponse, ProviderUnavailable
from testsmith.settings import ProviderConfig

logger = logging.getLogger(__name__)


class GeminiProvider(ProviderClient):
    """Single-text generative backend."""

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__(config)
        self.client = genai.Client(api_key=self.api_key)

    def invoke(self, prompt: Prompt, timeout: float | None = None) -> ProviderReply:
        logger.debug("Calling gemini generate_content with model %s", self.model)
        generation_config = types.GenerateContentConfig(
            temperature=self.config.temperature,
            max_output_tokens=self.config.max_tokens,
            # HttpOptions.timeout is in milliseconds
            http_options=types.HttpOptions(timeout=int(self._timeout(timeout) * 1000)),
        )
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt.as_single_text(),
                config=generation_config,
            )
        except errors.APIError as e:
            raise error_for_status(e.code, str(e.message or e)) from e
        except httpx.TransportError as e:
            # Includes connect/read timeouts
            raise ProviderUnavailable(f"gemini API unreachable: {e}") from e

        return self._reply(self._parse_content(response))

    def _parse_content(self, response) -> str:
        try:
            text = response.candidates[0].content.parts[0].text
        except (AttributeError, IndexError, TypeError) as e:
            raise ProviderMalformedResponse(
                "gemini response has no candidates[0].content.parts[0].text"
            ) from e
        if not isinstance(text, str) or not text.strip():
            raise ProviderMalformedResponse("gemini API returned empty content")
        return text
