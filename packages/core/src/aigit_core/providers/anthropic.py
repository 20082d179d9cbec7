from __future__ import annotations

from aigit_core.errors import NoResponseError
from aigit_core.models import ProviderConfig
from aigit_core.providers.base import BaseProvider


class AnthropicProvider(BaseProvider):
    NAME = "Anthropic"
    MODEL = "claude-sonnet-4-20250514"
    QUOTA_HINT = "Please check your Anthropic rate limits at https://console.anthropic.com/settings/limits"

    def __init__(self, config: ProviderConfig):
        super().__init__(config)
        try:
            from anthropic import Anthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for this provider. Install it with: pip install anthropic"
            )
        self.client = Anthropic(api_key=config.api_key, max_retries=0)

    def _call_api(self, prompt: str, timeout: float | None) -> str:
        # Imported inside the method because __init__ already validated the
        # package is installed before we reach here.
        from anthropic import NOT_GIVEN
        from anthropic.types import TextBlock

        response = self.client.messages.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
            timeout=timeout if timeout is not None else NOT_GIVEN,
        )
        if not response.content:
            raise NoResponseError("no response from Anthropic")
        text_blocks = [block.text for block in response.content if isinstance(block, TextBlock)]
        return "".join(text_blocks).strip()

    def _is_rate_limit(self, error: Exception) -> bool:
        from anthropic import RateLimitError as AnthropicRateLimitError

        if isinstance(error, AnthropicRateLimitError):
            return True
        return super()._is_rate_limit(error)

    def _close(self) -> None:
        self.client.close()
