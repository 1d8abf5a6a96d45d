"""Anthropic Messages API provider."""

import logging

import anthropic
from anthropic import Anthropic

from testsmith.models import Prompt, ProviderReply
from testsmith.providers.base import ProviderClient, error_for_status, retry_after_seconds
from testsmith.providers.exceptions import ProviderMalformedResponse, ProviderUnavailable
from testsmith.settings import ProviderConfig

logger = logging.getLogger(__name__)


class AnthropicProvider(ProviderClient):
    """System prompt plus one user message; reply is the joined text blocks."""

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__(config)
        self.client = Anthropic(
            api_key=self.api_key,
            max_retries=0,
            timeout=config.request_timeout,
        )

    def invoke(self, prompt: Prompt, timeout: float | None = None) -> ProviderReply:
        logger.debug("Calling anthropic messages with model %s", self.model)
        try:
            response = self.client.messages.create(
                model=self.model,
                system=prompt.system_instruction,
                messages=[{"role": "user", "content": prompt.user_instruction}],
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                timeout=self._timeout(timeout),
            )
        except anthropic.APIConnectionError as e:
            raise ProviderUnavailable(f"anthropic API unreachable: {e}") from e
        except anthropic.APIStatusError as e:
            raise error_for_status(
                e.status_code,
                e.message,
                retry_after=retry_after_seconds(getattr(e.response, "headers", None)),
            ) from e

        return self._reply(self._parse_content(response))

    def _parse_content(self, response) -> str:
        try:
            text = "".join(
                block.text
                for block in response.content
                if getattr(block, "type", None) == "text"
            )
        except (AttributeError, TypeError) as e:
            raise ProviderMalformedResponse("anthropic response has no text content") from e
        if not text.strip():
            raise ProviderMalformedResponse("anthropic API returned empty content")
        return text
