"""Chat-completions provider (OpenAI and OpenAI-compatible APIs such as Perplexity)."""

import logging

import openai

from testsmith.models import Prompt, ProviderReply
from testsmith.providers.base import ProviderClient, error_for_status, retry_after_seconds
from testsmith.providers.exceptions import ProviderMalformedResponse, ProviderUnavailable
from testsmith.settings import ProviderConfig

logger = logging.getLogger(__name__)


class OpenAIChatProvider(ProviderClient):
    """Message-list request, ``choices[0].message.content`` response."""

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__(config)
        self.client = openai.OpenAI(
            api_key=self.api_key,
            base_url=config.base_url,
            max_retries=0,
            timeout=config.request_timeout,
        )

    def invoke(self, prompt: Prompt, timeout: float | None = None) -> ProviderReply:
        logger.debug("Calling %s chat completions with model %s", self.name, self.model)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": prompt.system_instruction},
                    {"role": "user", "content": prompt.user_instruction},
                ],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
                timeout=self._timeout(timeout),
            )
        except openai.APIConnectionError as e:
            # Includes APITimeoutError
            raise ProviderUnavailable(f"{self.name} API unreachable: {e}") from e
        except openai.APIStatusError as e:
            raise error_for_status(
                e.status_code,
                e.message,
                retry_after=retry_after_seconds(getattr(e.response, "headers", None)),
            ) from e

        return self._reply(self._parse_content(response))

    def _parse_content(self, response) -> str:
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise ProviderMalformedResponse(
                f"{self.name} response has no choices[0].message.content"
            ) from e
        if not isinstance(content, str) or not content.strip():
            raise ProviderMalformedResponse(f"{self.name} API returned empty content")
        return content
