from __future__ import annotations

try:
    import openai as _openai_mod
    from openai import OpenAI as _OpenAI
except ImportError:
    _openai_mod = None  # type: ignore[assignment]
    _OpenAI = None  # type: ignore[assignment,misc]

from aigit_core.errors import NoResponseError
from aigit_core.models import ProviderConfig
from aigit_core.providers.base import BaseProvider


class OpenAIProvider(BaseProvider):
    NAME = "OpenAI"
    MODEL = "gpt-4o-mini"
    QUOTA_HINT = "Please check your OpenAI API quota and billing at https://platform.openai.com/usage"

    def __init__(self, config: ProviderConfig):
        super().__init__(config)
        if _OpenAI is None:
            raise ImportError("The 'openai' package is required for this provider. Install it with: pip install openai")
        # Retries are ours; the SDK's own retry loop would double the backoff.
        self.client = _OpenAI(api_key=config.api_key, max_retries=0)

    def _call_api(self, prompt: str, timeout: float | None) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
            timeout=timeout,
        )
        if not response.choices:
            raise NoResponseError("no response from OpenAI")
        return response.choices[0].message.content or ""

    def _is_rate_limit(self, error: Exception) -> bool:
        if _openai_mod is not None and isinstance(error, _openai_mod.RateLimitError):
            return True
        return super()._is_rate_limit(error)

    def _close(self) -> None:
        self.client.close()
